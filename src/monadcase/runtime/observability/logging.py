"""Structured logging for the composition engine.

Lowering and transformer construction are pure, so the engine only emits
DEBUG events (chain compiled, transformer policies resolved, conditioning).
Each event is a name plus keyword fields, handed to one renderer:

- ConsoleRenderer: one human-readable line per event
- JsonRenderer: JSON lines through orjson
- NoOpRenderer: discards everything

Renderer and level live in context variables; when nothing has been
configured they are built from the MONADCASE_LOG_* settings on first use.

    >>> configure_logging(format="console", level="DEBUG")
    >>> log = get_logger("monadcase.translator")
    >>> log.debug("chain compiled", monad="sequence", binds=2)
    12:04:31.228 [debug] chain compiled binds=2 logger="monadcase.translator" monad="sequence"
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from fractions import Fraction
from typing import Any, Protocol, TextIO, runtime_checkable

import orjson

from monadcase.foundation.config import get_settings
from monadcase.foundation.errors import JsonDict, JsonValue

_scoped_fields: ContextVar[JsonDict] = ContextVar("monadcase_log_fields", default={})
_active_renderer: ContextVar[LogRenderer | None] = ContextVar("monadcase_log_renderer", default=None)
_active_level: ContextVar[int | None] = ContextVar("monadcase_log_level", default=None)


# ─────────────────────────────────────────────────────────────────────────────
# Events
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One emitted event with its merged fields."""

    created: float
    level: str
    event: str
    fields: JsonDict

    @property
    def timestamp(self) -> datetime:
        return datetime.fromtimestamp(self.created, tz=UTC)


@dataclass(slots=True)
class BoundLogger:
    """Logger carrying fields that are attached to every event it emits.

    `bind()`/`unbind()` return new loggers. The level is looked up per call,
    so module-level loggers follow a later configure_logging().
    """

    context: JsonDict = field(default_factory=dict)
    renderer: LogRenderer | None = None

    def bind(self, **fields: JsonValue) -> BoundLogger:
        return BoundLogger({**self.context, **fields}, self.renderer)

    def unbind(self, *keys: str) -> BoundLogger:
        return BoundLogger({k: v for k, v in self.context.items() if k not in keys}, self.renderer)

    def is_enabled_for(self, level: int) -> bool:
        return level >= _current_level()

    def log(self, level: int, event: str, **fields: JsonValue) -> None:
        if not self.is_enabled_for(level):
            return
        entry = LogEntry(
            created=time.time(),
            level=logging.getLevelName(level).lower(),
            event=event,
            fields={**_scoped_fields.get(), **self.context, **fields},
        )
        (self.renderer or _current_renderer()).render(entry)

    def debug(self, event: str, **fields: JsonValue) -> None:
        self.log(logging.DEBUG, event, **fields)

    def info(self, event: str, **fields: JsonValue) -> None:
        self.log(logging.INFO, event, **fields)

    def warning(self, event: str, **fields: JsonValue) -> None:
        self.log(logging.WARNING, event, **fields)


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class LogRenderer(Protocol):
    def render(self, entry: LogEntry) -> None: ...


_ANSI = {"reset": "\033[0m", "dim": "\033[2m", "bold": "\033[1m", "key": "\033[36m",
         "debug": "\033[2m", "info": "\033[32m", "warning": "\033[33m", "error": "\033[31m"}


def _console_value(v: object) -> str:
    match v:
        case bool():
            return "true" if v else "false"
        case str():
            return f'"{v}"'
        case Fraction():
            return f"{v.numerator}/{v.denominator}"
        case int() | float():
            return str(v)
        case _:
            return repr(v)


@dataclass(slots=True)
class ConsoleRenderer:
    """`HH:MM:SS.mmm [level] event key=value ...` with keys sorted."""

    output: TextIO = field(default_factory=lambda: sys.stderr)
    colors: bool | None = None

    def __post_init__(self) -> None:
        if self.colors is None:
            isatty = getattr(self.output, "isatty", None)
            self.colors = bool(isatty and isatty())

    def _paint(self, text: str, style: str) -> str:
        return f"{_ANSI[style]}{text}{_ANSI['reset']}" if self.colors else text

    def render(self, entry: LogEntry) -> None:
        stamp = entry.timestamp.strftime("%H:%M:%S.%f")[:-3]
        pairs = " ".join(
            f"{self._paint(k, 'key')}={_console_value(v)}" for k, v in sorted(entry.fields.items())
        )
        line = " ".join(filter(None, (
            self._paint(stamp, "dim"),
            self._paint(f"[{entry.level}]", entry.level if entry.level in _ANSI else "dim"),
            self._paint(entry.event, "bold"),
            pairs,
        )))
        print(line, file=self.output)


def _json_default(v: Any) -> Any:
    if isinstance(v, Fraction):
        return str(v)
    if isinstance(v, (set, frozenset)):
        return sorted(v, key=repr)
    return repr(v)


@dataclass(slots=True)
class JsonRenderer:
    """One JSON object per line: timestamp, level, event, then the fields."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        record = {"timestamp": entry.timestamp.isoformat(), "level": entry.level, "event": entry.event}
        record.update(entry.fields)
        self.output.write(orjson.dumps(record, default=_json_default, option=orjson.OPT_NON_STR_KEYS).decode())
        self.output.write("\n")


class NoOpRenderer:
    def render(self, entry: LogEntry) -> None:
        return None


# ─────────────────────────────────────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────────────────────────────────────


def configure_logging(
    format: str | None = None,  # noqa: A002
    level: str | None = None,
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> LogRenderer:
    """Install a renderer and level for the current context.

    Arguments left as None fall back to MONADCASE_LOG_FORMAT,
    MONADCASE_LOG_LEVEL (or DEBUG when MONADCASE_DEBUG is set) and
    MONADCASE_LOG_COLORS.

    Raises:
        ValueError: If format is not "console", "json" or "none"
    """
    settings = get_settings()
    fmt = format or settings.logging.format
    renderer: LogRenderer
    if fmt == "console":
        use_colors = colors if colors is not None else settings.logging.colors
        renderer = ConsoleRenderer(output or sys.stderr, use_colors)
    elif fmt == "json":
        renderer = JsonRenderer(output or sys.stdout)
    elif fmt == "none":
        renderer = NoOpRenderer()
    else:
        raise ValueError(f"Unknown format: {fmt!r}. Use 'console', 'json' or 'none'")
    level_name = (level or settings.effective_log_level).upper()
    _active_level.set(logging.getLevelNamesMapping().get(level_name, logging.WARNING))
    _active_renderer.set(renderer)
    return renderer


def reset_logging() -> None:
    """Forget the configured renderer and level; the next event re-reads settings."""
    _active_renderer.set(None)
    _active_level.set(None)


def get_logger(name: str | None = None, **fields: JsonValue) -> BoundLogger:
    """Logger whose events carry `logger=name` plus the given fields."""
    return BoundLogger({**fields, "logger": name} if name else dict(fields))


def _current_renderer() -> LogRenderer:
    renderer = _active_renderer.get()
    return renderer if renderer is not None else configure_logging()


def _current_level() -> int:
    level = _active_level.get()
    if level is None:
        level = logging.getLevelNamesMapping().get(get_settings().effective_log_level, logging.WARNING)
        _active_level.set(level)
    return level


@contextmanager
def log_context(**fields: JsonValue) -> Iterator[None]:
    """Attach fields to every event logged inside the block."""
    token = _scoped_fields.set({**_scoped_fields.get(), **fields})
    try:
        yield
    finally:
        _scoped_fields.reset(token)
