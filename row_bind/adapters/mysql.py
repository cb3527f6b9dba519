"""MySQL adapter using mysql-connector-python."""

from __future__ import annotations

from typing import Any

from row_bind.core.connection import ConnectionConfig
from row_bind.core.exceptions import ConnectionError  # noqa: A004


class MysqlAdapter:
    """MySQL adapter using mysql-connector-python."""

    def connect(self, config: ConnectionConfig) -> Any:
        import mysql.connector

        params: dict[str, Any] = {"database": config.database}
        for key in ("host", "port", "user", "password"):
            value = getattr(config, key)
            if value is not None:
                params[key] = value
        params.update(config.extra)

        try:
            return mysql.connector.connect(**params)
        except mysql.connector.Error as e:
            raise ConnectionError(f"Cannot connect to MySQL: {e}") from e

    def close(self, connection: Any) -> None:
        connection.close()

    def cursor(self, connection: Any) -> Any:
        # Buffered so a statement can be re-executed before all rows are read.
        return connection.cursor(buffered=True)
