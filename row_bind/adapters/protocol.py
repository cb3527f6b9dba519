"""Database adapter protocol.

Every adapter module MUST implement this protocol so the Database wrapper
can drive any backend through the same calls.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from row_bind.core.connection import ConnectionConfig


@runtime_checkable
class Adapter(Protocol):
    """Database adapter protocol."""

    def connect(self, config: ConnectionConfig) -> Any:
        """Open a DB-API connection."""
        ...

    def close(self, connection: Any) -> None:
        """Close a connection opened by connect()."""
        ...

    def cursor(self, connection: Any) -> Any:
        """Open a DB-API cursor on the connection."""
        ...
