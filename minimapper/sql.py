"""
SQL text generation for the two supported statements.

Identifiers are emitted verbatim from the record description; the table is
assumed to exist with matching columns. Placeholders use the connection's
parameter token (`?` by default, `%s` for psycopg).
"""

from __future__ import annotations

from minimapper.domain.metadata import FieldMetadata

DEFAULT_PLACEHOLDER = "?"


def insert_statement(metadata: FieldMetadata, placeholder: str = DEFAULT_PLACEHOLDER) -> str:
    """
    `INSERT INTO <table> (<pk>,<col1>,...) VALUES (?,?,...);`

    The primary key comes first, followed by the mapped columns in
    declaration order; parameters must be bound in the same order.
    """
    names = [metadata.primary_key.name] + [column.name for column in metadata.columns]
    placeholders = ",".join([placeholder] * len(names))
    return f"INSERT INTO {metadata.table} ({','.join(names)}) VALUES ({placeholders});"


def select_by_key_statement(metadata: FieldMetadata, placeholder: str = DEFAULT_PLACEHOLDER) -> str:
    """`SELECT * FROM <table> WHERE <pk> = ?;` with the key as the single bound parameter."""
    return f"SELECT * FROM {metadata.table} WHERE {metadata.primary_key.name} = {placeholder};"


__all__ = ["DEFAULT_PLACEHOLDER", "insert_statement", "select_by_key_statement"]
