"""row_bind - scan SQL result rows into records by column name."""

from __future__ import annotations

from row_bind.core.connection import ConnectionConfig
from row_bind.core.database import Database
from row_bind.core.enums import BindMode, DatabaseBackend
from row_bind.core.exceptions import (
    AdapterError,
    BindingError,
    ConnectionError,  # noqa: A004
    ExecutionError,
    MappingError,
    MissingColumnError,
    NoRowsError,
    PlanCompilationError,
    RowBindError,
    ScanError,
    TransactionError,
    TransactionStateError,
    UnsupportedDestinationError,
)
from row_bind.core.statement import Row, Rows, Statement
from row_bind.core.transaction import Transaction
from row_bind.mapping import (
    AttributeTarget,
    BaseTarget,
    Cell,
    ScanTarget,
    column,
    column_field,
    compile_plan,
    map_columns,
    ref,
)

__all__ = [
    # Connection
    "ConnectionConfig",
    "Database",
    # Execution
    "Statement",
    "Row",
    "Rows",
    "Transaction",
    # Mapping
    "map_columns",
    "compile_plan",
    "column",
    "column_field",
    "ref",
    "ScanTarget",
    "AttributeTarget",
    "BaseTarget",
    "Cell",
    # Enums
    "BindMode",
    "DatabaseBackend",
    # Exceptions
    "RowBindError",
    "MappingError",
    "BindingError",
    "MissingColumnError",
    "UnsupportedDestinationError",
    "PlanCompilationError",
    "ExecutionError",
    "NoRowsError",
    "ScanError",
    "TransactionError",
    "TransactionStateError",
    "AdapterError",
    "ConnectionError",
]
