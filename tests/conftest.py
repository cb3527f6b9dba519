"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from row_bind.core.connection import ConnectionConfig
from row_bind.core.database import Database


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config."""
    return ConnectionConfig(driver="sqlite", database=":memory:")


@pytest.fixture
def db(sqlite_config: ConnectionConfig) -> Iterator[Database]:
    """In-memory database with users and comments.

    Usage:
        db.query_row("SELECT name FROM users WHERE userid = ?", 1)
    """
    database = Database.open(sqlite_config)
    conn = database.connection
    conn.execute("CREATE TABLE users (userid INTEGER PRIMARY KEY, name TEXT NOT NULL)")
    conn.execute(
        "CREATE TABLE comments (id INTEGER PRIMARY KEY, userid INTEGER NOT NULL, "
        "body TEXT NOT NULL, date TEXT)"
    )
    conn.execute("INSERT INTO users (userid, name) VALUES (1, 'alice'), (2, 'bob')")
    conn.execute(
        "INSERT INTO comments (id, userid, body, date) VALUES "
        "(1, 1, 'hello', NULL), (2, 2, 'world', '2024-03-01T12:30:00')"
    )
    conn.commit()
    try:
        yield database
    finally:
        database.close()
