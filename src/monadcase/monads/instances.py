"""Plug-in monad instances.

Each instance is a `Monad` descriptor built from one-line policies:

| Instance    | result(v)          | bind(mv, f)                     | zero        | plus          |
|-------------|--------------------|---------------------------------|-------------|---------------|
| identity_m  | v                  | f(v)                            | -           | -             |
| maybe_m     | Some(v)            | f(x) if mv is Some(x) else NOTHING | NOTHING  | first Some    |
| sequence_m  | [v]                | flatten(map(f, mv))             | []          | concatenation |
| set_m       | frozenset({v})     | union of f(x) for x in mv       | frozenset() | union         |
| state_m     | s -> (v, s)        | s -> f(v)(s2) where (v, s2) = mv(s) | -       | -             |
| writer_m    | (v, empty)         | (v2, combine(acc, acc2))        | -           | -             |
| cont_m      | k -> k(v)          | k -> mv(v -> f(v)(k))           | -           | -             |

state_m and cont_m containers are deferred computations: nothing runs until
an initial state (or final continuation) is supplied.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from typing import Any, Callable, TypeVar

from .descriptor import Monad
from .option import NOTHING, Option, Some

S = TypeVar("S")

StateFn = Callable[[Any], tuple[Any, Any]]


def _identity(x: Any) -> Any:
    return x


# ═════════════════════════════════════════════════════════════════════════════
# Identity
# ═════════════════════════════════════════════════════════════════════════════


identity_m = Monad.create("identity", result=_identity, bind=lambda mv, f: f(mv))


# ═════════════════════════════════════════════════════════════════════════════
# Maybe
# ═════════════════════════════════════════════════════════════════════════════


def _maybe_bind(mv: Option[Any], f: Callable[[Any], Option[Any]]) -> Option[Any]:
    return f(mv.unwrap()) if mv.is_some() else NOTHING


def _maybe_plus(*mvs: Option[Any]) -> Option[Any]:
    return next((mv for mv in mvs if mv.is_some()), NOTHING)


maybe_m = Monad.create("maybe", result=Some, bind=_maybe_bind, zero=NOTHING, plus=_maybe_plus)


# ═════════════════════════════════════════════════════════════════════════════
# Sequence / Set
# ═════════════════════════════════════════════════════════════════════════════


def _sequence_bind(mv: Iterable[Any], f: Callable[[Any], Iterable[Any]]) -> list[Any]:
    return [y for x in mv for y in f(x)]


def _sequence_plus(*mvs: Iterable[Any]) -> list[Any]:
    return [x for mv in mvs for x in mv]


sequence_m = Monad.create(
    "sequence",
    result=lambda v: [v],
    bind=_sequence_bind,
    zero=[],
    plus=_sequence_plus,
)


def _set_bind(mv: Iterable[Hashable], f: Callable[[Any], Iterable[Hashable]]) -> frozenset[Hashable]:
    return frozenset(y for x in mv for y in f(x))


def _set_plus(*mvs: Iterable[Hashable]) -> frozenset[Hashable]:
    return frozenset().union(*mvs)


set_m = Monad.create(
    "set",
    result=lambda v: frozenset((v,)),
    bind=_set_bind,
    zero=frozenset(),
    plus=_set_plus,
)


# ═════════════════════════════════════════════════════════════════════════════
# State
# ═════════════════════════════════════════════════════════════════════════════


def _state_result(v: Any) -> StateFn:
    return lambda s: (v, s)


def _state_bind(mv: StateFn, f: Callable[[Any], StateFn]) -> StateFn:
    def run(s: Any) -> tuple[Any, Any]:
        v, s2 = mv(s)
        return f(v)(s2)
    return run


state_m = Monad.create("state", result=_state_result, bind=_state_bind)


def run_state(mv: StateFn, initial: Any) -> tuple[Any, Any]:
    """Execute a state computation, returning (value, final_state)."""
    return mv(initial)


def eval_state(mv: StateFn, initial: Any) -> Any:
    return mv(initial)[0]


def exec_state(mv: StateFn, initial: Any) -> Any:
    return mv(initial)[1]


def update_state(f: Callable[[S], S]) -> StateFn:
    """Replace the state with f(state); the value is the old state."""
    return lambda s: (s, f(s))


def set_state(new_state: Any) -> StateFn:
    """Replace the state; the value is the old state."""
    return update_state(lambda _: new_state)


def fetch_state() -> StateFn:
    """Return the state as the value, leaving it unchanged."""
    return update_state(_identity)


def fetch_val(key: Hashable) -> StateFn:
    """Return state[key] (None if missing) for a mapping state."""
    return lambda s: (s.get(key), s)


def update_val(key: Hashable, f: Callable[[Any], Any]) -> StateFn:
    """Replace state[key] with f(state[key]) in a copy of the mapping; the value is the old entry."""
    def run(s: Mapping[Hashable, Any]) -> tuple[Any, dict[Hashable, Any]]:
        old = s.get(key)
        return old, {**s, key: f(old)}
    return run


def set_val(key: Hashable, value: Any) -> StateFn:
    return update_val(key, lambda _: value)


def with_state_field(key: Hashable, statement: StateFn) -> StateFn:
    """Run a state computation against one field of a mapping state."""
    def run(s: Mapping[Hashable, Any]) -> tuple[Any, dict[Hashable, Any]]:
        v, field_state = statement(s.get(key))
        return v, {**s, key: field_state}
    return run


# ═════════════════════════════════════════════════════════════════════════════
# Writer
# ═════════════════════════════════════════════════════════════════════════════


def writer_m(empty: Any = (), combine: Callable[[Any, Any], Any] | None = None) -> Monad:
    """Writer monad over an accumulator with an identity element and associative combine.

    Values are (value, accumulator) pairs. The default combine is `+`, which
    covers tuples, lists, strings and numbers.

    Example:
        >>> w = writer_m(())
        >>> w.bind(tell(("start",)), lambda _: (42, ("done",)))
        (42, ('start', 'done'))
    """
    join = combine or (lambda a, b: a + b)

    def bind(mv: tuple[Any, Any], f: Callable[[Any], tuple[Any, Any]]) -> tuple[Any, Any]:
        v, acc = mv
        v2, acc2 = f(v)
        return v2, join(acc, acc2)

    return Monad.create("writer", result=lambda v: (v, empty), bind=bind)


def tell(entry: Any) -> tuple[None, Any]:
    """Writer value that only contributes to the accumulator."""
    return None, entry


def listen(mv: tuple[Any, Any]) -> tuple[tuple[Any, Any], Any]:
    """Expose the accumulator produced so far alongside the value."""
    v, acc = mv
    return (v, acc), acc


def censor(f: Callable[[Any], Any], mv: tuple[Any, Any]) -> tuple[Any, Any]:
    v, acc = mv
    return v, f(acc)


# ═════════════════════════════════════════════════════════════════════════════
# Continuation
# ═════════════════════════════════════════════════════════════════════════════

Cont = Callable[[Callable[[Any], Any]], Any]


def _cont_bind(mv: Cont, f: Callable[[Any], Cont]) -> Cont:
    return lambda k: mv(lambda v: f(v)(k))


cont_m = Monad.create("cont", result=lambda v: (lambda k: k(v)), bind=_cont_bind)


def run_cont(mv: Cont, k: Callable[[Any], Any] = _identity) -> Any:
    """Execute a continuation computation with a final continuation (identity by default)."""
    return mv(k)


def call_cc(f: Callable[[Callable[[Any], Cont]], Cont]) -> Cont:
    """Call with current continuation: f receives an escape function that aborts to the caller."""
    return lambda k: f(lambda v: (lambda _: k(v)))(k)
