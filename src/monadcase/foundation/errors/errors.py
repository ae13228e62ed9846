"""Error taxonomy for monad composition.

Every error here signals a contract violation by the caller (a descriptor
without bind, a filter clause against a monad with no zero, a lifted function
called with the wrong number of arguments). They are raised synchronously at
the point of misuse and carry a structured `MonadFault` for programmatic
handling.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ErrorCode(StrEnum):
    """Machine-readable codes for composition failures."""
    MALFORMED_DESCRIPTOR = "MALFORMED_DESCRIPTOR"
    MISSING_ZERO = "MISSING_ZERO"
    ARITY_MISMATCH = "ARITY_MISMATCH"
    EMPTY_LIST = "EMPTY_LIST"
    UNDEFINED_OPERATION = "UNDEFINED_OPERATION"
    INVALID_DISTRIBUTION = "INVALID_DISTRIBUTION"
    INVALID_CHAIN = "INVALID_CHAIN"


# Codes raised while building a value (descriptor, chain, program) rather than while running it
_CONSTRUCTION_CODES = frozenset({
    ErrorCode.MALFORMED_DESCRIPTOR,
    ErrorCode.MISSING_ZERO,
    ErrorCode.INVALID_CHAIN,
})


class MonadFault(BaseModel):
    """Structured description of a composition error.

    Attributes:
        operation: Name of the operation that was misused (e.g. "lower", "lift")
        message: Human-readable error message
        code: Machine-readable error code
        details: Optional extra context (descriptor name, offending entry, ...)
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        json_schema_extra={
            "title": "Monad Fault",
            "description": "Structured error from monad composition",
            "examples": [{
                "operation": "lower",
                "message": "filter clause requires a zero",
                "code": "MISSING_ZERO",
            }],
        },
    )

    operation: Annotated[str, Field(min_length=1, description="Operation that was misused")]
    message: Annotated[str, Field(min_length=1, description="Human-readable error message")]
    code: ErrorCode = Field(description="Machine-readable error classification")
    details: str | None = Field(default=None, description="Optional extra context")

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        return str(v) if isinstance(v, Exception) else v

    @computed_field
    @property
    def at_construction(self) -> bool:
        """Whether the fault was detected while building rather than running."""
        return self.code in _CONSTRUCTION_CODES

    def render(self) -> str:
        """Single-line form used as the exception message."""
        base = f"[{self.code}] {self.operation}: {self.message}"
        return f"{base} ({self.details})" if self.details else base

    def __str__(self) -> str:
        return self.render()


class MonadError(Exception):
    """Base exception wrapping a MonadFault."""

    code: ErrorCode = ErrorCode.UNDEFINED_OPERATION

    def __init__(self, fault: MonadFault) -> None:
        self.fault = fault
        super().__init__(fault.render())

    @classmethod
    def create(cls, operation: str, message: str, *, details: str | None = None) -> Self:
        """Build the exception and its fault in one step."""
        return cls(MonadFault(operation=operation, message=message, code=cls.code, details=details))


class MalformedDescriptorError(MonadError):
    """A descriptor is missing `result`/`bind` or carries a non-callable operation."""
    code = ErrorCode.MALFORMED_DESCRIPTOR


class MissingZeroError(MonadError):
    """A filter clause was lowered against a monad that defines no zero."""
    code = ErrorCode.MISSING_ZERO


class ArityMismatchError(MonadError, TypeError):
    """A lifted function received a different number of arguments than declared."""
    code = ErrorCode.ARITY_MISMATCH


class EmptyListError(MonadError, ValueError):
    """A combinator that needs at least one element received none."""
    code = ErrorCode.EMPTY_LIST


class UndefinedOperationError(MonadError):
    """`zero`/`plus` requested from a descriptor that omits them."""
    code = ErrorCode.UNDEFINED_OPERATION


class InvalidDistributionError(MonadError, ValueError):
    """A distribution carries a non-positive weight or no outcomes."""
    code = ErrorCode.INVALID_DISTRIBUTION


class InvalidChainError(MonadError, ValueError):
    """A binding chain entry is malformed (bad name, non-callable expression)."""
    code = ErrorCode.INVALID_CHAIN
