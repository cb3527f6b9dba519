"""SQLite adapter using stdlib sqlite3."""

from __future__ import annotations

import sqlite3

from row_bind.core.connection import ConnectionConfig
from row_bind.core.exceptions import ConnectionError  # noqa: A004


class SqliteAdapter:
    """SQLite adapter using stdlib sqlite3."""

    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        try:
            return sqlite3.connect(config.database, **config.extra)
        except sqlite3.Error as e:
            raise ConnectionError(f"Cannot open SQLite database '{config.database}': {e}") from e

    def close(self, connection: sqlite3.Connection) -> None:
        connection.close()

    def cursor(self, connection: sqlite3.Connection) -> sqlite3.Cursor:
        return connection.cursor()
