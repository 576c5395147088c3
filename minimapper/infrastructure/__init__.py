"""
Infrastructure package for minimapper.

Centralizes database connectivity concerns (connection collaborators and the
factory that opens them). Keep this layer focused on I/O, decoupled from the
mapping engine.
"""

from minimapper.infrastructure.connection import (
    Connection,
    PsycopgConnection,
    Row,
    SQLiteConnection,
)
from minimapper.infrastructure.db_factory import (
    build_dsn,
    get_sqlite_connection,
    get_sync_connection,
    open_connection,
)

__all__ = [
    "Connection",
    "Row",
    "PsycopgConnection",
    "SQLiteConnection",
    "build_dsn",
    "get_sqlite_connection",
    "get_sync_connection",
    "open_connection",
]
