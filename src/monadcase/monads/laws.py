"""Executable monad laws.

A descriptor is valid iff it satisfies:

1. Left identity:   bind(result(v), f) == f(v)
2. Right identity:  bind(m, result) == m
3. Associativity:   bind(bind(m, f), g) == bind(m, lambda x: bind(f(x), g))
4. Zero/plus:       plus(zero, m) == plus(m, zero) == m   (when both exist)

Validity is never checked at construction. These helpers let tests (or
callers plugging in their own instances) check it on sample values.

Deferred containers (state, continuation) are functions and cannot be
compared directly; pass `observe` to run them first, e.g.
`observe=lambda mv: mv(initial_state)`.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from .descriptor import Monad

LawName = Literal["left_identity", "right_identity", "associativity", "zero_plus"]
Observe = Callable[[Any], Any]
Eq = Callable[[Any, Any], bool]


def _same(x: Any) -> Any:
    return x


@dataclass(frozen=True, slots=True)
class LawViolation:
    """One failed law instance, with both observed sides."""

    law: LawName
    monad: str
    left: Any
    right: Any
    sample: Any = None

    def __str__(self) -> str:
        return f"{self.monad}: {self.law} violated for {self.sample!r}: {self.left!r} != {self.right!r}"


# ═════════════════════════════════════════════════════════════════════════════
# Single-law checks
# ═════════════════════════════════════════════════════════════════════════════


def check_left_identity(
    monad: Monad, v: Any, f: Callable[[Any], Any], *, observe: Observe = _same, eq: Eq = operator.eq,
) -> LawViolation | None:
    left, right = observe(monad.bind(monad.result(v), f)), observe(f(v))
    return None if eq(left, right) else LawViolation("left_identity", monad.name, left, right, v)


def check_right_identity(
    monad: Monad, m: Any, *, observe: Observe = _same, eq: Eq = operator.eq,
) -> LawViolation | None:
    left, right = observe(monad.bind(m, monad.result)), observe(m)
    return None if eq(left, right) else LawViolation("right_identity", monad.name, left, right, m)


def check_associativity(
    monad: Monad,
    m: Any,
    f: Callable[[Any], Any],
    g: Callable[[Any], Any],
    *,
    observe: Observe = _same,
    eq: Eq = operator.eq,
) -> LawViolation | None:
    left = observe(monad.bind(monad.bind(m, f), g))
    right = observe(monad.bind(m, lambda x: monad.bind(f(x), g)))
    return None if eq(left, right) else LawViolation("associativity", monad.name, left, right, m)


def check_zero_plus(
    monad: Monad, m: Any, *, observe: Observe = _same, eq: Eq = operator.eq,
) -> LawViolation | None:
    """Raises UndefinedOperationError if the monad lacks zero or plus."""
    expected = observe(m)
    for left in (observe(monad.plus(monad.zero, m)), observe(monad.plus(m, monad.zero))):
        if not eq(left, expected):
            return LawViolation("zero_plus", monad.name, left, expected, m)
    return None


# ═════════════════════════════════════════════════════════════════════════════
# Batch verification
# ═════════════════════════════════════════════════════════════════════════════


def verify_laws(
    monad: Monad,
    values: Iterable[Any],
    monadic_values: Sequence[Any],
    fns: Sequence[Callable[[Any], Any]],
    *,
    observe: Observe = _same,
    eq: Eq = operator.eq,
) -> list[LawViolation]:
    """Check every law over the cross product of the samples.

    Returns:
        All violations found; an empty list means the samples are lawful.
    """
    checks: list[LawViolation | None] = []
    for v in values:
        checks += [check_left_identity(monad, v, f, observe=observe, eq=eq) for f in fns]
    for m in monadic_values:
        checks.append(check_right_identity(monad, m, observe=observe, eq=eq))
        checks += [check_associativity(monad, m, f, g, observe=observe, eq=eq) for f in fns for g in fns]
        if monad.has_zero and monad.has_plus:
            checks.append(check_zero_plus(monad, m, observe=observe, eq=eq))
    return [c for c in checks if c is not None]
