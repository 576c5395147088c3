"""
Mapping engine: persists record instances as rows and reconstructs them by
primary key.

Usage:
    from minimapper import Mapper

    with Mapper.connect() as mapper:
        key = mapper.write(Account(balance=7000, owner="Neha"))
        account = mapper.read(Account, key)

Metadata is extracted on every call. Keys come from the mapper's key
generator, never from the record being written, and the written record is
left untouched.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any, List, Optional, Sequence, Type, TypeVar

from pydantic import ValidationError

from minimapper.config import Settings, get_settings
from minimapper.domain.errors import (
    ConfigurationError,
    MapperError,
    NotFoundError,
    PersistenceError,
    UnsupportedTypeError,
)
from minimapper.domain.metadata import FieldDescriptor, FieldMetadata, extract
from minimapper.domain.types import (
    CoercionError,
    SemanticType,
    from_column,
    is_supported,
    to_parameter,
)
from minimapper.infrastructure.connection import Connection, Row
from minimapper.infrastructure.db_factory import open_connection
from minimapper.keys import CounterKeyGenerator, KeyGenerator
from minimapper.sql import DEFAULT_PLACEHOLDER, insert_statement, select_by_key_statement
from minimapper.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")


def _require_supported(metadata: FieldMetadata, descriptor: FieldDescriptor) -> SemanticType:
    if descriptor.semantic_type is None or not is_supported(descriptor.semantic_type):
        raise UnsupportedTypeError(metadata.record_name, descriptor.name, descriptor.type_name)
    return descriptor.semantic_type


def _require_int64_key(metadata: FieldMetadata) -> FieldDescriptor:
    primary_key = metadata.primary_key
    if primary_key.semantic_type is not SemanticType.INT64:
        raise UnsupportedTypeError(metadata.record_name, primary_key.name, primary_key.type_name)
    return primary_key


def _bind(metadata: FieldMetadata, descriptor: FieldDescriptor, value: Any) -> Any:
    semantic_type = _require_supported(metadata, descriptor)
    try:
        return to_parameter(semantic_type, value)
    except CoercionError as exc:
        raise UnsupportedTypeError(
            metadata.record_name, descriptor.name, descriptor.type_name, reason=str(exc)
        ) from exc


def _load(metadata: FieldMetadata, descriptor: FieldDescriptor, row: Row) -> Any:
    value = _column_value(metadata, row, descriptor.name)
    try:
        return from_column(descriptor.semantic_type, value)
    except CoercionError as exc:
        raise PersistenceError(
            f"Column '{metadata.table}.{descriptor.name}' holds an invalid value: {exc}",
            details={"table": metadata.table, "column": descriptor.name},
        ) from exc


def _column_value(metadata: FieldMetadata, row: Row, name: str) -> Any:
    # PostgreSQL folds unquoted identifiers to lower case.
    if name in row:
        return row[name]
    lowered = name.lower()
    for column, value in row.items():
        if column.lower() == lowered:
            return value
    raise PersistenceError(
        f"Result row from '{metadata.table}' has no column '{name}'",
        details={"table": metadata.table, "column": name, "columns": list(row.keys())},
    )


class Mapper:
    """
    Maps record instances to rows of one connection.

    Parameters
    ----------
    connection : Connection
        Open connection collaborator. The mapper does not serialize access to
        it; share a mapper across threads only with external locking.
    key_generator : KeyGenerator, optional
        Source of primary keys. Defaults to a fresh `CounterKeyGenerator`
        starting at 0.
    """

    def __init__(
        self, connection: Connection, key_generator: Optional[KeyGenerator] = None
    ) -> None:
        self._connection = connection
        self._keys = key_generator if key_generator is not None else CounterKeyGenerator()

    @classmethod
    def connect(cls, settings: Optional[Settings] = None) -> "Mapper":
        """Open a connection from configuration and bind a new mapper to it."""
        settings = settings or get_settings()
        return cls(open_connection(settings), CounterKeyGenerator(start=settings.key_start))

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def key_generator(self) -> KeyGenerator:
        return self._keys

    @property
    def _placeholder(self) -> str:
        return getattr(self._connection, "placeholder", DEFAULT_PLACEHOLDER)

    def write(self, record: Any) -> int:
        """
        Insert `record` as a new row and return the primary key assigned to it.

        The key is drawn after every column value has been coerced, so only
        attempts that reach the connection consume one. A failed insert does
        not give its key back.

        Raises
        ------
        ConfigurationError
            The record type is unregistered or has no primary key.
        UnsupportedTypeError
            The primary key is not `Int64`, a column has no coercion rule, or
            a column value cannot be coerced to its type (e.g. out of range).
        PersistenceError
            The connection failed to execute the insert.
        """
        metadata = extract(type(record))
        _require_int64_key(metadata)

        values = [_bind(metadata, column, column.getter(record)) for column in metadata.columns]
        sql = insert_statement(metadata, self._placeholder)
        key = self._keys.next_key()

        log.debug(
            "insert",
            extra={"table": metadata.table, "key": key, "columns": len(metadata.columns)},
        )
        self._execute(sql, [key, *values])
        return key

    def read(self, record_type: Type[T], key: int) -> T:
        """
        Load the row whose primary key equals `key` into a new `record_type` instance.

        Raises
        ------
        ConfigurationError
            The record type is unregistered, has no primary key, or cannot be
            constructed without arguments.
        UnsupportedTypeError
            The primary key is not `Int64` or a column has no coercion rule.
        NotFoundError
            No row matches `key`.
        PersistenceError
            The query failed, the row lacks a mapped column, or a column
            holds a value its type cannot represent.
        """
        metadata = extract(record_type)
        primary_key = _require_int64_key(metadata)
        for column in metadata.columns:
            _require_supported(metadata, column)

        sql = select_by_key_statement(metadata, self._placeholder)
        log.debug("select", extra={"table": metadata.table, "key": key})
        rows = self._query(sql, [key])
        if not rows:
            raise NotFoundError(metadata.table, key)
        row = rows[0]

        instance = self._new_instance(metadata)
        for descriptor in (primary_key, *metadata.columns):
            self._assign(metadata, instance, descriptor, _load(metadata, descriptor, row))
        return instance

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> "Mapper":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    # Internals

    def _execute(self, sql: str, params: Sequence[Any]) -> int:
        try:
            return self._connection.execute(sql, params)
        except MapperError:
            raise
        except Exception as exc:  # noqa: BLE001 - any driver failure surfaces as PersistenceError
            raise PersistenceError(f"Statement failed: {exc}", details={"sql": sql}) from exc

    def _query(self, sql: str, params: Sequence[Any]) -> List[Row]:
        try:
            return list(self._connection.query(sql, params))
        except MapperError:
            raise
        except Exception as exc:  # noqa: BLE001 - any driver failure surfaces as PersistenceError
            raise PersistenceError(f"Query failed: {exc}", details={"sql": sql}) from exc

    @staticmethod
    def _new_instance(metadata: FieldMetadata) -> Any:
        try:
            return metadata.factory()
        except (TypeError, ValidationError) as exc:
            raise ConfigurationError(
                f"Record type '{metadata.record_name}' cannot be constructed without arguments",
                details={"record_type": metadata.record_name},
            ) from exc

    @staticmethod
    def _assign(
        metadata: FieldMetadata, instance: Any, descriptor: FieldDescriptor, value: Any
    ) -> None:
        try:
            descriptor.setter(instance, value)
        except ValidationError as exc:
            raise PersistenceError(
                f"Column '{metadata.table}.{descriptor.name}' holds a value rejected by the field",
                details={"table": metadata.table, "column": descriptor.name},
            ) from exc


__all__ = ["Mapper"]
