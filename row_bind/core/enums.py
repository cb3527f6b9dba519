"""Enumerations shared across row_bind."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"


class BindMode(Enum):
    """Where a bound field's target is placed in the scan list.

    BY_NAME puts each target at the index of its matched column.
    BY_POSITION puts targets at a write cursor that advances per field, so
    field declaration order must equal column order.
    """

    BY_NAME = "by_name"
    BY_POSITION = "by_position"
