"""
Error taxonomy for minimapper.

Every failure raised by `Mapper.write` / `Mapper.read` derives from
`MapperError`. Errors are surfaced to the immediate caller; the mapper does
no local recovery and no retries.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class MapperError(Exception):
    """Base exception for all mapping failures."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


class ConfigurationError(MapperError):
    """A record type cannot be mapped: missing/duplicate primary key, unregistered, or no default constructor."""


class UnsupportedTypeError(MapperError):
    """A field's semantic type has no coercion rule, or its value cannot be coerced."""

    def __init__(
        self,
        record_type: str,
        field_name: str,
        type_name: str,
        reason: Optional[str] = None,
    ) -> None:
        message = f"Unsupported type '{type_name}' for field '{record_type}.{field_name}'"
        details: Dict[str, Any] = {"record_type": record_type, "field": field_name, "type": type_name}
        if reason:
            message = f"Unsupported value for {type_name} field '{record_type}.{field_name}': {reason}"
            details["reason"] = reason
        super().__init__(message, details=details)


class PersistenceError(MapperError):
    """The connection collaborator reported a failure while executing a statement."""


class NotFoundError(MapperError):
    """A lookup by primary key matched no row."""

    def __init__(self, table: str, key: int) -> None:
        super().__init__(
            f"No row in '{table}' with primary key {key}",
            details={"table": table, "key": key},
        )
        self.table = table
        self.key = key


__all__ = [
    "MapperError",
    "ConfigurationError",
    "UnsupportedTypeError",
    "PersistenceError",
    "NotFoundError",
]
