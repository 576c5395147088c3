"""
Connection collaborators used by the mapper.

The mapper only needs two capabilities from a connection: executing a
parameterized mutating statement and running a parameterized query whose
rows are readable by column name. Both adapters run in autocommit mode (the
mapper never opens transactions) and translate driver errors into
`PersistenceError` with the driver exception chained.
"""

from __future__ import annotations

import sqlite3
from contextlib import closing
from typing import Any, List, Mapping, Protocol, Sequence, runtime_checkable

import psycopg
from psycopg.rows import dict_row

from minimapper.domain.errors import PersistenceError

Row = Mapping[str, Any]


@runtime_checkable
class Connection(Protocol):
    """
    Minimal connection contract consumed by `Mapper`.

    Attributes
    ----------
    placeholder : str
        Positional parameter token understood by the driver.
    """

    placeholder: str

    def execute(self, sql: str, params: Sequence[Any]) -> int:
        """Execute a mutating statement and return the affected row count."""
        ...

    def query(self, sql: str, params: Sequence[Any]) -> List[Row]:
        """Execute a query and return its rows keyed by column name."""
        ...

    def close(self) -> None:
        ...


class PsycopgConnection:
    """PostgreSQL connection backed by psycopg 3."""

    placeholder: str = "%s"

    def __init__(self, conn: psycopg.Connection) -> None:
        self._conn = conn

    def execute(self, sql: str, params: Sequence[Any]) -> int:
        try:
            with self._conn.cursor() as cur:
                cur.execute(sql, list(params))
                return cur.rowcount
        except psycopg.Error as exc:
            raise PersistenceError(
                f"Statement failed: {exc}", details={"sql": sql, "driver": "psycopg"}
            ) from exc

    def query(self, sql: str, params: Sequence[Any]) -> List[Row]:
        try:
            with self._conn.cursor(row_factory=dict_row) as cur:
                cur.execute(sql, list(params))
                return cur.fetchall()
        except psycopg.Error as exc:
            raise PersistenceError(
                f"Query failed: {exc}", details={"sql": sql, "driver": "psycopg"}
            ) from exc

    def close(self) -> None:
        self._conn.close()


class SQLiteConnection:
    """Embedded SQLite connection backed by the standard library driver."""

    placeholder: str = "?"

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def execute(self, sql: str, params: Sequence[Any]) -> int:
        try:
            with closing(self._conn.cursor()) as cur:
                cur.execute(sql, tuple(params))
                return cur.rowcount
        except sqlite3.Error as exc:
            raise PersistenceError(
                f"Statement failed: {exc}", details={"sql": sql, "driver": "sqlite3"}
            ) from exc

    def query(self, sql: str, params: Sequence[Any]) -> List[Row]:
        try:
            with closing(self._conn.cursor()) as cur:
                cur.row_factory = sqlite3.Row
                cur.execute(sql, tuple(params))
                return [dict(row) for row in cur.fetchall()]
        except sqlite3.Error as exc:
            raise PersistenceError(
                f"Query failed: {exc}", details={"sql": sql, "driver": "sqlite3"}
            ) from exc

    def close(self) -> None:
        self._conn.close()


__all__ = ["Connection", "Row", "PsycopgConnection", "SQLiteConnection"]
