"""Binding chains: the data form of sequential monadic binding.

A chain is an ordered tuple of entries plus one trailing result expression:

    Bind(name, expr)     bind the value inside expr's container to name
    Let(name, expr)      bind a plain value to name (no bind call)
    Filter(predicate)    continue only when predicate holds, else zero

Every expression is a callable taking a read-only `Scope` of the names bound
so far (plus any free variables supplied when the chain is run):

    >>> chain = (
    ...     steps()
    ...     .bind("a", lambda s: [0, 1, 2, 3, 4])
    ...     .when(lambda s: s.a % 2 == 1)
    ...     .returning(lambda s: 2 * s.a)
    ... )

Chains are immutable; every builder method returns a new chain. They hold no
reference to a monad: the same chain can be lowered against any descriptor.
"""

from __future__ import annotations

import keyword
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, TypeAlias

from monadcase.foundation.errors import InvalidChainError

Expr: TypeAlias = "Callable[[Scope], Any]"


# ═════════════════════════════════════════════════════════════════════════════
# Scope
# ═════════════════════════════════════════════════════════════════════════════


class Scope(Mapping[str, Any]):
    """Read-only view of bound names, with attribute and item access.

    Extending a scope returns a new one; the parent is never modified, so a
    scope captured by one branch of a sequence/distribution bind cannot be
    disturbed by another.
    """

    __slots__ = ("_names",)

    def __init__(self, names: Mapping[str, Any] | None = None) -> None:
        self._names: dict[str, Any] = dict(names or {})

    def extend(self, name: str, value: Any) -> Scope:
        return Scope({**self._names, name: value})

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name == "_names":
            raise AttributeError(name)
        try:
            return self._names[name]
        except KeyError:
            raise AttributeError(f"name '{name}' is not bound in this chain") from None

    def __getitem__(self, name: str) -> Any:
        return self._names[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"Scope({self._names!r})"


EMPTY_SCOPE = Scope()

# Names that attribute access on a Scope resolves to its own members
RESERVED_NAMES: frozenset[str] = frozenset(name for name in dir(Scope) if not name.startswith("__"))


# ═════════════════════════════════════════════════════════════════════════════
# Entries
# ═════════════════════════════════════════════════════════════════════════════


def _check_name(name: object) -> str:
    if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
        raise InvalidChainError.create("chain", f"binding name must be an identifier, got {name!r}")
    if name in RESERVED_NAMES:
        raise InvalidChainError.create("chain", f"binding name '{name}' is reserved by Scope")
    return name


def _check_expr(expr: object, role: str) -> None:
    if not callable(expr):
        raise InvalidChainError.create(
            "chain", f"{role} must be a callable of the scope, got {type(expr).__name__}",
        )


@dataclass(frozen=True, slots=True)
class Bind:
    """Bind the value inside expr's monadic result to name."""

    name: str
    expr: Expr

    def __post_init__(self) -> None:
        _check_name(self.name)
        _check_expr(self.expr, f"expression for '{self.name}'")


@dataclass(frozen=True, slots=True)
class Let:
    """Bind expr's plain value to name."""

    name: str
    expr: Expr

    def __post_init__(self) -> None:
        _check_name(self.name)
        _check_expr(self.expr, f"let expression for '{self.name}'")


@dataclass(frozen=True, slots=True)
class Filter:
    """Continue the chain only if predicate(scope) is truthy."""

    predicate: Expr

    def __post_init__(self) -> None:
        _check_expr(self.predicate, "filter predicate")


Entry: TypeAlias = Bind | Let | Filter


# ═════════════════════════════════════════════════════════════════════════════
# Chain
# ═════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Chain:
    """Ordered entries plus the trailing result expression.

    A chain without a result expression is still being built; it cannot be
    lowered until `returning()` supplies one.
    """

    entries: tuple[Entry, ...] = ()
    result: Expr | None = None
    _names: frozenset[str] = field(default=frozenset(), repr=False, compare=False)

    def __post_init__(self) -> None:
        for entry in self.entries:
            if not isinstance(entry, (Bind, Let, Filter)):
                raise InvalidChainError.create("chain", f"unknown entry type {type(entry).__name__}")
        if self.result is not None:
            _check_expr(self.result, "result expression")
        names = frozenset(e.name for e in self.entries if not isinstance(e, Filter))
        object.__setattr__(self, "_names", names)

    @classmethod
    def of(cls, *entries: Entry, result: Expr) -> Chain:
        return cls(tuple(entries), result)

    # Builder --------------------------------------------------------------

    def bind(self, name: str, expr: Expr) -> Chain:
        return Chain((*self.entries, Bind(name, expr)), self.result)

    def let(self, name: str, expr: Expr) -> Chain:
        return Chain((*self.entries, Let(name, expr)), self.result)

    def when(self, predicate: Expr) -> Chain:
        return Chain((*self.entries, Filter(predicate)), self.result)

    def when_not(self, predicate: Expr) -> Chain:
        return self.when(lambda s: not predicate(s))

    def returning(self, expr: Expr) -> Chain:
        return Chain(self.entries, expr)

    # Inspection -----------------------------------------------------------

    @property
    def is_complete(self) -> bool:
        return self.result is not None

    @property
    def names(self) -> frozenset[str]:
        """Every name bound by the chain."""
        return self._names

    @property
    def bind_count(self) -> int:
        return sum(1 for e in self.entries if isinstance(e, Bind))

    @property
    def has_filters(self) -> bool:
        return any(isinstance(e, Filter) for e in self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def steps() -> Chain:
    """Start an empty chain for fluent building."""
    return Chain()
