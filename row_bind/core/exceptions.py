"""row_bind exception hierarchy.

Mapping errors are raised by row_bind itself. Driver exceptions raised while
executing a statement are propagated unchanged.
"""

from __future__ import annotations


class RowBindError(Exception):
    """Base exception for all row_bind errors."""


# --- Mapping ---


class MappingError(RowBindError):
    """Base for mapping errors."""


class BindingError(MappingError):
    """Raised when a destination cannot be bound to a result's columns."""


class MissingColumnError(BindingError):
    """Raised when a field's binding tag names a column the result lacks."""

    kind = "missing_column"

    def __init__(self, tag: str, columns: list[str]) -> None:
        self.tag = tag
        self.columns = columns
        super().__init__(f"Could not find column '{tag}' in {columns}")


class UnsupportedDestinationError(BindingError):
    """Raised when a scan destination is neither a record nor a list of targets."""

    def __init__(self, destination: object) -> None:
        self.destination = destination
        super().__init__(
            f"Cannot scan into {type(destination).__name__}: expected a record, "
            "a list of records, or a list of scan targets"
        )


class PlanCompilationError(MappingError):
    """Raised when a record type declares an invalid set of bindings."""


# --- Execution ---


class ExecutionError(RowBindError):
    """Base for query execution errors."""


class NoRowsError(ExecutionError):
    """Raised when a single-row query finds no row."""

    def __init__(self, query: str | None = None) -> None:
        self.query = query
        if query is None:
            super().__init__("no rows in result set")
        else:
            super().__init__(f"no rows in result set for '{query}'")


class ScanError(ExecutionError):
    """Raised when a row value cannot be copied into its scan target."""

    def __init__(self, column: str | None, detail: str) -> None:
        self.column = column
        if column is None:
            super().__init__(f"Scan failed: {detail}")
        else:
            super().__init__(f"Scan failed for column '{column}': {detail}")


# --- Transaction ---


class TransactionError(RowBindError):
    """Base for transaction errors."""


class TransactionStateError(TransactionError):
    """Raised on invalid transaction state transitions."""

    def __init__(self, current_state: str, attempted_action: str) -> None:
        self.current_state = current_state
        self.attempted_action = attempted_action
        super().__init__(f"Cannot {attempted_action} transaction in state '{current_state}'")


# --- Adapter ---


class AdapterError(RowBindError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""
