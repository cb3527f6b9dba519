"""Connection configuration and adapter loading.

ConnectionConfig is a Pydantic model for type-safe connection config.
Adapters are resolved from the configured driver name and imported lazily,
so only the driver actually in use needs to be installed.
"""

from __future__ import annotations

import importlib
from typing import Any

from pydantic import BaseModel

from row_bind.core.enums import BindMode, DatabaseBackend
from row_bind.core.exceptions import AdapterError


class ConnectionConfig(BaseModel):
    """Configuration for a database connection."""

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    extra: dict[str, Any] = {}
    bind_mode: BindMode = BindMode.BY_NAME
    log_queries: bool = True


# Adapter module mapping: backend -> (module_path, class_name)
_ADAPTER_MAP: dict[DatabaseBackend, tuple[str, str]] = {
    DatabaseBackend.SQLITE: ("row_bind.adapters.sqlite", "SqliteAdapter"),
    DatabaseBackend.POSTGRESQL: ("row_bind.adapters.postgresql", "PostgresqlAdapter"),
    DatabaseBackend.MYSQL: ("row_bind.adapters.mysql", "MysqlAdapter"),
}


def load_adapter(driver: str) -> Any:
    """Load an adapter by driver name."""
    try:
        backend = DatabaseBackend(driver.lower())
    except ValueError:
        raise AdapterError(f"Unsupported database driver: {driver}") from None

    module_path, cls_name = _ADAPTER_MAP[backend]

    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver}': {e}") from e
