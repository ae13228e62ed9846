"""Option sum type: a value that is either present (Some) or absent (NOTHING).

Used wherever "maybe there is a value" must not be confused with a legitimate
`None` payload:
- the maybe monad's container
- the absent marker threaded through the maybe transformer
- the optional zero/plus slots of a monad descriptor
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Callable, Generic, TypeVar, cast

from monadcase.foundation.errors import UndefinedOperationError

if TYPE_CHECKING:
    from collections.abc import Iterator

T = TypeVar("T")
U = TypeVar("U")


class Option(Generic[T]):
    """Discriminated union of Some(value) and NOTHING.

    Examples:
        >>> Some(3).map(lambda x: x + 1)
        Some(4)
        >>> NOTHING.map(lambda x: x + 1)
        Nothing
        >>> Some(None).is_some()
        True

    Notes:
        - Uses __slots__ and is immutable (all operations return new Options)
        - NOTHING is a singleton, so `opt is NOTHING` is a valid test
    """

    __slots__ = ("_value", "_present")
    __match_args__ = ("_value",)

    def __init__(self, value: T | None, present: bool) -> None:
        """Private constructor. Use Some() or Nothing() instead."""
        self._value = value
        self._present = present

    # ─────────────────────────────────────────────────────────────────
    # Type Checking
    # ─────────────────────────────────────────────────────────────────

    def is_some(self) -> bool:
        return self._present

    def is_nothing(self) -> bool:
        return not self._present

    # ─────────────────────────────────────────────────────────────────
    # Value Extraction
    # ─────────────────────────────────────────────────────────────────

    def unwrap(self) -> T:
        """Extract the present value.

        Raises:
            UndefinedOperationError: If the option is NOTHING
        """
        if self._present:
            return cast(T, self._value)
        raise UndefinedOperationError.create("unwrap", "called unwrap() on Nothing")

    def unwrap_or(self, default: T) -> T:
        return cast(T, self._value) if self._present else default

    def to_optional(self) -> T | None:
        """Collapse to a nullable value (loses the Some(None)/Nothing distinction)."""
        return cast(T, self._value) if self._present else None

    # ─────────────────────────────────────────────────────────────────
    # Functor / Monad Operations
    # ─────────────────────────────────────────────────────────────────

    def map(self, f: Callable[[T], U]) -> Option[U]:
        if self._present:
            return Some(f(cast(T, self._value)))
        return cast("Option[U]", NOTHING)

    def flat_map(self, f: Callable[[T], Option[U]]) -> Option[U]:
        """Monadic bind (>>=): apply f to the present value, propagate NOTHING."""
        if self._present:
            return f(cast(T, self._value))
        return cast("Option[U]", NOTHING)

    def or_(self, other: Option[T]) -> Option[T]:
        """Return self if present, otherwise other."""
        return self if self._present else other

    # ─────────────────────────────────────────────────────────────────
    # Dunder Methods
    # ─────────────────────────────────────────────────────────────────

    def __bool__(self) -> bool:
        return self._present

    def __repr__(self) -> str:
        return f"Some({self._value!r})" if self._present else "Nothing"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Option):
            return NotImplemented
        return self._present == other._present and (not self._present or self._value == other._value)

    def __hash__(self) -> int:
        return hash((self._present, self._value))

    def __iter__(self) -> Iterator[T]:
        """Iterate over the present value (yields 0 or 1 element)."""
        if self._present:
            yield cast(T, self._value)

    # NOTHING survives copy, deepcopy and pickling as the same singleton
    def __copy__(self) -> Option[T]:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> Option[T]:
        if not self._present:
            return self
        return Some(copy.deepcopy(self._value, memo))

    def __reduce__(self) -> tuple[Callable[..., Option[T]], tuple[object, ...]]:
        return (Some, (self._value,)) if self._present else (Nothing, ())


# ═════════════════════════════════════════════════════════════════════════════
# Constructors
# ═════════════════════════════════════════════════════════════════════════════


NOTHING: Option = Option(None, present=False)


def Some(value: T) -> Option[T]:  # noqa: N802
    """Construct the present variant."""
    return Option(value, present=True)


def Nothing() -> Option:  # noqa: N802
    """Return the absent singleton."""
    return NOTHING


def is_absent(value: object) -> bool:
    """True only for the NOTHING marker, never for None or other falsy data."""
    return value is NOTHING
