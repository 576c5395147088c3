"""
Database connection factory utilities for minimapper.

Opens the single connection a `Mapper` is bound to. PostgreSQL connections
go through psycopg with retry logic for transient connection failures using
tenacity; SQLite connections open a local database file. Retries apply to
establishing the connection only, never to mapper statements.
"""

from __future__ import annotations

import sqlite3
from typing import Optional

import psycopg
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from minimapper.config import Settings, get_settings
from minimapper.infrastructure.connection import Connection, PsycopgConnection, SQLiteConnection
from minimapper.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a PostgreSQL DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(
    dsn: Optional[str] = None, connect_timeout: Optional[int] = None
) -> psycopg.Connection:
    """
    Acquire a dedicated autocommit psycopg connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Parameters
    ----------
    dsn : str, optional
        Connection string. Defaults to the one built from settings.
    connect_timeout : int, optional
        Seconds to wait for the server. Defaults to settings.db_connect_timeout.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    settings = get_settings()
    return psycopg.connect(
        dsn or build_dsn(settings),
        autocommit=True,
        connect_timeout=connect_timeout or settings.db_connect_timeout,
    )


def get_sqlite_connection(path: Optional[str] = None) -> sqlite3.Connection:
    """Open an autocommit SQLite connection (`:memory:` is accepted)."""
    return sqlite3.connect(path or get_settings().sqlite_path, isolation_level=None)


def open_connection(settings: Optional[Settings] = None) -> Connection:
    """
    Open the connection collaborator selected by `settings.db_backend`.

    Returns
    -------
    Connection
        A `PsycopgConnection` or `SQLiteConnection`.
    """
    settings = settings or get_settings()
    if settings.db_backend == "sqlite":
        log.info("Opening SQLite connection", extra={"path": settings.sqlite_path})
        return SQLiteConnection(get_sqlite_connection(settings.sqlite_path))

    log.info(
        "Opening PostgreSQL connection",
        extra={"host": settings.db_host, "port": settings.db_port, "db": settings.db_name},
    )
    return PsycopgConnection(
        get_sync_connection(build_dsn(settings), connect_timeout=settings.db_connect_timeout)
    )


__all__ = [
    "build_dsn",
    "get_sync_connection",
    "get_sqlite_connection",
    "open_connection",
]
