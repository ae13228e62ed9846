"""JSON-shaped aliases for structured log context and fault details."""

from __future__ import annotations

from typing import Any, Union

# Nested containers stay Any so pydantic never has to resolve a recursive alias
JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list[Any], dict[str, Any]]
JsonDict = dict[str, Any]
