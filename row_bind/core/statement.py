"""Statements and result rows.

A Statement wraps one SQL string on a connection and opens a fresh cursor
per execution. Results are read through Row (single-row, deferred error)
or Rows (iteration inside Statement.query), and both scan through the
column mapper so callers can pass records instead of positional targets.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from row_bind.core.cursor import Cursor
from row_bind.core.enums import BindMode
from row_bind.core.exceptions import ExecutionError, NoRowsError
from row_bind.mapping.columns import map_columns
from row_bind.mapping.protocol import ScanTarget

T = TypeVar("T")


def _destination(dest: tuple[Any, ...]) -> Any:
    # scan([a, b]) and scan(a, b) are equivalent
    if len(dest) == 1 and isinstance(dest[0], (list, tuple)):
        return dest[0]
    return dest


def log_query(
    logger: logging.Logger,
    query: str,
    began: float,
    error: BaseException | None,
    prefix: str = "",
) -> None:
    elapsed_ms = (time.perf_counter() - began) * 1000
    logger.debug("%s%s %.3fms %s", prefix, query, elapsed_ms, error)


class Rows:
    """The current row of a cursor being iterated by Statement.query."""

    def __init__(self, cursor: Cursor, bind_mode: BindMode = BindMode.BY_NAME) -> None:
        self._cursor = cursor
        self._bind_mode = bind_mode

    def columns(self) -> list[str]:
        return self._cursor.columns()

    def targets(self, *dest: Any) -> list[ScanTarget]:
        """Map *dest* against this result's columns without scanning."""
        return map_columns(self.columns(), _destination(dest), self._bind_mode)

    def scan(self, *dest: Any) -> None:
        """Scan the current row into records or scan targets."""
        self._cursor.scan_into(self.targets(*dest))


class Row:
    """Result of a single-row query.

    Execution errors are held until scan() so the call can be chained:
    ``stmt.query_row(1).scan(user)``. The cursor stays open until the row is
    scanned; call close() to release a row that will not be scanned. When a
    logger is given, the query is logged once the row is finished.
    """

    def __init__(
        self,
        cursor: Cursor | None = None,
        *,
        error: BaseException | None = None,
        bind_mode: BindMode = BindMode.BY_NAME,
        query: str | None = None,
        logger: logging.Logger | None = None,
        began: float | None = None,
    ) -> None:
        self._cursor = cursor
        self._error = error
        self._bind_mode = bind_mode
        self._query = query
        self._logger = logger
        self._began = time.perf_counter() if began is None else began
        self._finished = False

    @property
    def error(self) -> BaseException | None:
        return self._error

    @property
    def finished(self) -> bool:
        return self._finished

    def scan(self, *dest: Any) -> None:
        """Scan the first row into *dest* and close the cursor.

        Raises:
            NoRowsError: The query returned no rows.
            MissingColumnError: A bound field has no matching column.
        """
        if self._error is not None:
            self._finish(self._error)
            raise self._error
        if self._finished or self._cursor is None or self._cursor.closed:
            raise ExecutionError("row has already been scanned or closed")

        cursor = self._cursor
        error: BaseException | None = None
        try:
            targets = map_columns(cursor.columns(), _destination(dest), self._bind_mode)
            if not cursor.next():
                raise NoRowsError(self._query)
            cursor.scan_into(targets)
        except Exception as e:
            error = e
            raise
        finally:
            self._finish(error)

    def close(self) -> None:
        """Release the cursor without scanning. Safe to call more than once."""
        self._finish(None)

    def _finish(self, error: BaseException | None) -> None:
        if self._finished:
            return
        self._finished = True
        if self._cursor is not None:
            self._cursor.close()
        if self._logger is not None:
            log_query(self._logger, self._query or "", self._began, error)


class Statement:
    """A SQL statement bound to a connection."""

    def __init__(
        self,
        connection: Any,
        adapter: Any,
        query: str,
        *,
        bind_mode: BindMode = BindMode.BY_NAME,
    ) -> None:
        self._connection = connection
        self._adapter = adapter
        self._bind_mode = bind_mode
        self._cursors: list[Cursor] = []
        self._closed = False
        self.query_text = query

    def _execute(self, args: tuple[Any, ...]) -> Cursor:
        if self._closed:
            raise ExecutionError(f"statement is closed: {self.query_text}")
        cursor = Cursor(self._adapter.cursor(self._connection))
        self._cursors = [c for c in self._cursors if not c.closed]
        self._cursors.append(cursor)
        try:
            cursor.execute(self.query_text, args)
        except Exception:
            cursor.close()
            raise
        return cursor

    def query(self, row_fn: Callable[[Rows], None], *args: Any) -> None:
        """Execute and call *row_fn* once per result row.

        Iteration stops at the first exception raised by *row_fn*, which
        propagates to the caller. The cursor is closed on every path.
        """
        cursor = self._execute(args)
        try:
            rows = Rows(cursor, self._bind_mode)
            while cursor.next():
                row_fn(rows)
        finally:
            cursor.close()

    def query_all(self, factory: Callable[[], T], *args: Any) -> list[T]:
        """Execute and scan each row into a fresh ``factory()`` record."""
        results: list[T] = []

        def collect(rows: Rows) -> None:
            record = factory()
            rows.scan(record)
            results.append(record)

        self.query(collect, *args)
        return results

    def query_row(self, *args: Any, logger: logging.Logger | None = None) -> Row:
        """Execute and return a Row; execution errors surface from Row.scan.

        With *logger*, the query and its elapsed time are logged when the
        row is scanned or closed.
        """
        options: dict[str, Any] = {
            "bind_mode": self._bind_mode,
            "query": self.query_text,
            "logger": logger,
            "began": time.perf_counter(),
        }
        try:
            cursor = self._execute(args)
        except Exception as e:
            return Row(error=e, **options)
        return Row(cursor, **options)

    def execute(self, *args: Any) -> int:
        """Execute a write statement. Returns the affected row count."""
        cursor = self._execute(args)
        try:
            return cursor.rowcount
        finally:
            cursor.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for cursor in self._cursors:
            cursor.close()
        self._cursors.clear()


@contextmanager
def prepared(
    connection: Any,
    adapter: Any,
    query: str,
    *,
    bind_mode: BindMode,
    logger: logging.Logger,
    log_queries: bool = True,
    prefix: str = "",
) -> Iterator[Statement]:
    """Yield a Statement, closing it and logging its timing on exit."""
    began = time.perf_counter()
    stmt = Statement(connection, adapter, query, bind_mode=bind_mode)
    error: BaseException | None = None
    try:
        yield stmt
    except Exception as e:
        error = e
        raise
    finally:
        stmt.close()
        if log_queries:
            log_query(logger, query, began, error, prefix)
