"""PostgreSQL adapter using psycopg (v3+)."""

from __future__ import annotations

from typing import Any

from row_bind.core.connection import ConnectionConfig
from row_bind.core.exceptions import ConnectionError  # noqa: A004


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    return " ".join(parts)


class PostgresqlAdapter:
    """PostgreSQL adapter using psycopg (v3+)."""

    def connect(self, config: ConnectionConfig) -> Any:
        import psycopg

        try:
            return psycopg.connect(_build_conninfo(config), **config.extra)
        except psycopg.Error as e:
            raise ConnectionError(f"Cannot connect to PostgreSQL: {e}") from e

    def close(self, connection: Any) -> None:
        connection.close()

    def cursor(self, connection: Any) -> Any:
        return connection.cursor()
