"""
Domain package for minimapper.

Exports record declaration helpers, semantic types, metadata extraction and
the error taxonomy. Keep this package free of I/O.
"""

from minimapper.domain.errors import (
    ConfigurationError,
    MapperError,
    NotFoundError,
    PersistenceError,
    UnsupportedTypeError,
)
from minimapper.domain.metadata import (
    FieldDescriptor,
    FieldMetadata,
    FieldSpec,
    RecordDescription,
    Role,
    describe,
    extract,
    register_record,
)
from minimapper.domain.models import Column, Entity, PrimaryKey
from minimapper.domain.types import Int32, Int64, SemanticType, Text

__all__ = [
    # Declaration
    "Entity",
    "PrimaryKey",
    "Column",
    "Int64",
    "Int32",
    "Text",
    "SemanticType",
    # Metadata
    "Role",
    "FieldSpec",
    "FieldDescriptor",
    "RecordDescription",
    "FieldMetadata",
    "register_record",
    "describe",
    "extract",
    # Errors
    "MapperError",
    "ConfigurationError",
    "UnsupportedTypeError",
    "PersistenceError",
    "NotFoundError",
]
