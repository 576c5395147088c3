"""
Pytest configuration for minimapper.

Provides fixtures for:
- A recording fake connection collaborator (no database needed)
- In-memory SQLite connections with the sample tables created
- PostgreSQL connection management for opt-in integration tests
"""

from __future__ import annotations

import os
from typing import Any, Generator, List, Mapping, Optional, Sequence, Tuple

import psycopg
import pytest

from minimapper.config import Settings
from minimapper.infrastructure.connection import SQLiteConnection
from minimapper.infrastructure.db_factory import get_sqlite_connection

SAMPLE_TABLES_DDL = (
    "CREATE TABLE Account (id INTEGER PRIMARY KEY, balance INTEGER, owner TEXT)",
    "CREATE TABLE TransactionHistory ("
    "transactionId BIGINT PRIMARY KEY, accountNumber INTEGER, name TEXT, "
    "transactionType TEXT, amount INTEGER)",
)


class FakeConnection:
    """Connection collaborator that records statements and serves canned rows."""

    def __init__(self, placeholder: str = "?") -> None:
        self.placeholder = placeholder
        self.executed: List[Tuple[str, Tuple[Any, ...]]] = []
        self.queries: List[Tuple[str, Tuple[Any, ...]]] = []
        self.rows: List[Mapping[str, Any]] = []
        self.fail_with: Optional[Exception] = None
        self.closed = False

    @property
    def statements(self) -> List[Tuple[str, Tuple[Any, ...]]]:
        return self.executed + self.queries

    def execute(self, sql: str, params: Sequence[Any]) -> int:
        self.executed.append((sql, tuple(params)))
        if self.fail_with is not None:
            raise self.fail_with
        return 1

    def query(self, sql: str, params: Sequence[Any]) -> List[Mapping[str, Any]]:
        self.queries.append((sql, tuple(params)))
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.rows)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def sqlite_connection() -> Generator[SQLiteConnection, None, None]:
    """
    In-memory SQLite connection with the Account and TransactionHistory tables.
    """
    connection = SQLiteConnection(get_sqlite_connection(":memory:"))
    for ddl in SAMPLE_TABLES_DDL:
        connection.execute(ddl, ())
    try:
        yield connection
    finally:
        connection.close()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "minimapper"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except Exception:
        return False


@pytest.fixture
def pg_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Autocommit PostgreSQL connection with freshly created sample tables.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        with conn.cursor() as cur:
            cur.execute("DROP TABLE IF EXISTS Account, TransactionHistory;")
            for ddl in SAMPLE_TABLES_DDL:
                cur.execute(ddl)
        yield conn
    finally:
        with conn.cursor() as cur:
            cur.execute("DROP TABLE IF EXISTS Account, TransactionHistory;")
        conn.close()
