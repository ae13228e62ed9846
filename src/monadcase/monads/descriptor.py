"""Monad descriptor: the four operations that define one monad instance.

A descriptor is passed explicitly to the translator and to every combinator,
so any number of monads can be in use at once without ambient rebinding.

Contract (not checked at construction, verified by `monadcase.monads.laws`):
    bind(result(v), f) == f(v)                                  left identity
    bind(m, result) == m                                        right identity
    bind(bind(m, f), g) == bind(m, lambda x: bind(f(x), g))     associativity
    plus(zero, m) == plus(m, zero) == m                         when both defined
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Final

from monadcase.foundation.errors import MalformedDescriptorError, UndefinedOperationError

from .option import NOTHING, Option, Some

Result = Callable[[Any], Any]
Bind = Callable[[Any, Callable[[Any], Any]], Any]
Plus = Callable[..., Any]


class _Unset:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<unset>"


# Distinguishes "no zero" from a zero that is legitimately None
UNSET: Final = _Unset()


class Monad:
    """Immutable bundle of result, bind and optional zero/plus.

    Example:
        >>> sequence = Monad.create(
        ...     "sequence",
        ...     result=lambda v: [v],
        ...     bind=lambda mv, f: [y for x in mv for y in f(x)],
        ...     zero=[],
        ...     plus=lambda *mvs: [x for mv in mvs for x in mv],
        ... )
        >>> sequence.bind([1, 2], lambda x: [x, x * 10])
        [1, 10, 2, 20]
        >>> sequence.plus(sequence.zero, [3])
        [3]
    """

    __slots__ = ("_name", "_result", "_bind", "_zero", "_plus")

    def __init__(
        self,
        name: str,
        result: Result,
        bind: Bind,
        zero: Option[Any] = NOTHING,
        plus: Option[Plus] = NOTHING,
    ) -> None:
        """Low-level constructor taking Option slots. Prefer Monad.create()."""
        self._name = name
        self._result = result
        self._bind = bind
        self._zero = zero
        self._plus = plus

    @classmethod
    def create(
        cls,
        name: str,
        *,
        result: Result | None = None,
        bind: Bind | None = None,
        zero: Any = UNSET,
        plus: Plus | None = None,
    ) -> Monad:
        """Validate the operations and build a descriptor.

        Raises:
            MalformedDescriptorError: If result or bind is missing or not callable,
                or plus is given but not callable
        """
        for label, op in (("result", result), ("bind", bind)):
            if op is None:
                raise MalformedDescriptorError.create("create", f"descriptor requires '{label}'", details=name)
            if not callable(op):
                raise MalformedDescriptorError.create(
                    "create", f"'{label}' must be callable, got {type(op).__name__}", details=name,
                )
        if plus is not None and not callable(plus):
            raise MalformedDescriptorError.create(
                "create", f"'plus' must be callable, got {type(plus).__name__}", details=name,
            )
        return cls(
            name,
            result,  # type: ignore[arg-type]
            bind,  # type: ignore[arg-type]
            NOTHING if zero is UNSET else Some(zero),
            NOTHING if plus is None else Some(plus),
        )

    # ─────────────────────────────────────────────────────────────────
    # Primitive Operations
    # ─────────────────────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    def result(self, value: Any) -> Any:
        """Lift a bare value into the container."""
        return self._result(value)

    def bind(self, mv: Any, f: Callable[[Any], Any]) -> Any:
        """Unwrap mv, apply the continuation, return the next container."""
        return self._bind(mv, f)

    @property
    def has_zero(self) -> bool:
        return self._zero.is_some()

    @property
    def has_plus(self) -> bool:
        return self._plus.is_some()

    @property
    def zero(self) -> Any:
        """The monad's "no result" value, a shallow copy on every access.

        Raises:
            UndefinedOperationError: If the descriptor omits zero
        """
        if self._zero.is_nothing():
            raise UndefinedOperationError.create("zero", f"monad '{self._name}' defines no zero")
        return copy.copy(self._zero.unwrap())

    def plus(self, *mvs: Any) -> Any:
        """Combine alternative results.

        Raises:
            UndefinedOperationError: If the descriptor omits plus
        """
        if self._plus.is_nothing():
            raise UndefinedOperationError.create("plus", f"monad '{self._name}' defines no plus")
        return self._plus.unwrap()(*mvs)

    @property
    def zero_option(self) -> Option[Any]:
        return self._zero.map(copy.copy)

    @property
    def plus_option(self) -> Option[Plus]:
        return self._plus

    # ─────────────────────────────────────────────────────────────────
    # Derivation
    # ─────────────────────────────────────────────────────────────────

    def with_name(self, name: str) -> Monad:
        return Monad(name, self._result, self._bind, self._zero, self._plus)

    def with_zero(self, zero: Any) -> Monad:
        return Monad(self._name, self._result, self._bind, Some(zero), self._plus)

    def with_plus(self, plus: Plus) -> Monad:
        if not callable(plus):
            raise MalformedDescriptorError.create("with_plus", "'plus' must be callable", details=self._name)
        return Monad(self._name, self._result, self._bind, self._zero, Some(plus))

    def without_zero_plus(self) -> Monad:
        return Monad(self._name, self._result, self._bind)

    def __repr__(self) -> str:
        extras = [label for label, slot in (("zero", self._zero), ("plus", self._plus)) if slot.is_some()]
        suffix = f" +{'+'.join(extras)}" if extras else ""
        return f"<Monad {self._name}{suffix}>"


def make_monad(
    name: str,
    result: Result | None,
    bind: Bind | None,
    zero: Any = UNSET,
    plus: Plus | None = None,
) -> Monad:
    """Positional form of Monad.create()."""
    return Monad.create(name, result=result, bind=bind, zero=zero, plus=plus)
