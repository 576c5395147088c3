"""
Semantic column types and the coercion rules between Python values and
statement parameters / result columns.

Record fields declare their semantic type through the annotated aliases
below; pydantic enforces the integer ranges on construction and assignment.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Callable, Dict, Tuple

from pydantic import Field

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class SemanticType(Enum):
    INT64 = "int64"
    INT32 = "int32"
    TEXT = "text"


Int64 = Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX), SemanticType.INT64]
Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX), SemanticType.INT32]
Text = Annotated[str, SemanticType.TEXT]


class CoercionError(ValueError):
    """A value cannot be represented in the requested semantic type."""


_INT_RANGES: Dict[SemanticType, Tuple[int, int]] = {
    SemanticType.INT64: (INT64_MIN, INT64_MAX),
    SemanticType.INT32: (INT32_MIN, INT32_MAX),
}


def _integer(semantic_type: SemanticType) -> Callable[[Any], int]:
    low, high = _INT_RANGES[semantic_type]

    def coerce(value: Any) -> int:
        try:
            number = int(value)
        except (TypeError, ValueError) as exc:
            raise CoercionError(f"{value!r} is not a valid {semantic_type.value}") from exc
        if not low <= number <= high:
            raise CoercionError(f"{number} is outside the {semantic_type.value} range")
        return number

    return coerce


_TO_PARAMETER: Dict[SemanticType, Callable[[Any], Any]] = {
    SemanticType.INT64: _integer(SemanticType.INT64),
    SemanticType.INT32: _integer(SemanticType.INT32),
    SemanticType.TEXT: str,
}

_FROM_COLUMN: Dict[SemanticType, Callable[[Any], Any]] = {
    SemanticType.INT64: _integer(SemanticType.INT64),
    SemanticType.INT32: _integer(SemanticType.INT32),
    SemanticType.TEXT: str,
}

# SQL NULL is read back as the type's zero value.
_ZERO: Dict[SemanticType, Any] = {
    SemanticType.INT64: 0,
    SemanticType.INT32: 0,
    SemanticType.TEXT: "",
}


def is_supported(semantic_type: SemanticType | None) -> bool:
    return semantic_type in _TO_PARAMETER


def to_parameter(semantic_type: SemanticType, value: Any) -> Any:
    """
    Coerce an in-memory field value into a statement parameter. None binds as NULL.

    Raises CoercionError for values that are not integers or fall outside the
    type's range.
    """
    if value is None:
        return None
    return _TO_PARAMETER[semantic_type](value)


def from_column(semantic_type: SemanticType, value: Any) -> Any:
    """Coerce a result column value into the field's Python representation."""
    if value is None:
        return _ZERO[semantic_type]
    return _FROM_COLUMN[semantic_type](value)


__all__ = [
    "SemanticType",
    "CoercionError",
    "Int64",
    "Int32",
    "Text",
    "INT32_MIN",
    "INT32_MAX",
    "INT64_MIN",
    "INT64_MAX",
    "is_supported",
    "to_parameter",
    "from_column",
]
