"""Error handling for monadcase.

- ErrorCode: Machine-readable codes for composition failures
- MonadFault: Structured, serializable error description
- MonadError and subclasses: the exception taxonomy raised at the point of misuse
"""

from .errors import (
    ArityMismatchError,
    EmptyListError,
    ErrorCode,
    InvalidChainError,
    InvalidDistributionError,
    MalformedDescriptorError,
    MissingZeroError,
    MonadError,
    MonadFault,
    UndefinedOperationError,
)
from .types import JsonDict, JsonPrimitive, JsonValue

__all__ = [
    "ErrorCode", "MonadFault", "MonadError",
    "MalformedDescriptorError", "MissingZeroError", "ArityMismatchError",
    "EmptyListError", "UndefinedOperationError", "InvalidDistributionError", "InvalidChainError",
    "JsonDict", "JsonPrimitive", "JsonValue",
]
