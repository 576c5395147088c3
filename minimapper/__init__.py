"""
minimapper - a minimal object-relational mapper.

Persists plain records to an existing relational table and reconstructs them
by primary key. SQL text and column bindings are derived from declarative
field metadata:

- `Entity` subclasses tag fields with `PrimaryKey()` / `Column()` and declare
  their semantic types with `Int64`, `Int32` and `Text`
- `Mapper.write` inserts a record under a generated 64-bit key
- `Mapper.read` loads a record by primary key

Only single-row insert and lookup by primary key are supported: no joins,
transactions, batching, schema management or caching.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from minimapper.config import Settings, get_settings
from minimapper.domain import (
    Column,
    ConfigurationError,
    Entity,
    FieldDescriptor,
    FieldMetadata,
    FieldSpec,
    Int32,
    Int64,
    MapperError,
    NotFoundError,
    PersistenceError,
    PrimaryKey,
    RecordDescription,
    Role,
    SemanticType,
    Text,
    UnsupportedTypeError,
    describe,
    extract,
    register_record,
)
from minimapper.engine import Mapper
from minimapper.infrastructure import Connection, PsycopgConnection, SQLiteConnection
from minimapper.keys import CounterKeyGenerator, KeyGenerator
from minimapper.utils.logging import configure_logging, configure_logging_from_settings, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Mapping
    "Mapper",
    "KeyGenerator",
    "CounterKeyGenerator",
    # Declaration
    "Entity",
    "PrimaryKey",
    "Column",
    "Int64",
    "Int32",
    "Text",
    "SemanticType",
    "Role",
    "FieldSpec",
    "FieldDescriptor",
    "RecordDescription",
    "FieldMetadata",
    "register_record",
    "describe",
    "extract",
    # Connections
    "Connection",
    "PsycopgConnection",
    "SQLiteConnection",
    # Errors
    "MapperError",
    "ConfigurationError",
    "UnsupportedTypeError",
    "PersistenceError",
    "NotFoundError",
    # Logging
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
]
