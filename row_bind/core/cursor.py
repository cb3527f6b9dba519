"""Row cursor over a DB-API cursor.

Exposes the four calls the mapping layer depends on: column names, row
advance, scanning the current row into targets, and close.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from row_bind.core.exceptions import ExecutionError, ScanError
from row_bind.mapping.protocol import ScanTarget
from row_bind.mapping.targets import BaseTarget


class Cursor:
    """Forward-only cursor holding at most one current row."""

    def __init__(self, raw: Any) -> None:
        self._raw = raw
        self._row: Sequence[Any] | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def execute(self, query: str, args: Sequence[Any]) -> None:
        self._check_open()
        if args:
            self._raw.execute(query, tuple(args))
        else:
            self._raw.execute(query)

    def columns(self) -> list[str]:
        """Result column names, available before any row is read."""
        self._check_open()
        if self._raw.description is None:
            return []
        return [desc[0] for desc in self._raw.description]

    @property
    def rowcount(self) -> int:
        return int(self._raw.rowcount)

    def next(self) -> bool:
        """Advance to the next row. Returns False once the result is exhausted."""
        self._check_open()
        if self._raw.description is None:
            self._row = None
            return False
        row = self._raw.fetchone()
        if row is None:
            self._row = None
            return False
        # Dict-like rows (e.g. psycopg dict_row) keep column order in their values
        self._row = list(row.values()) if isinstance(row, dict) else tuple(row)
        return True

    def scan_into(self, targets: Sequence[ScanTarget]) -> None:
        """Copy the current row into *targets*, one per column, in order.

        Every value is converted before any target is written, so a column
        that fails conversion leaves the other targets unchanged. Targets
        that only implement ``set()`` are written in the second pass.
        """
        self._check_open()
        if self._row is None:
            raise ScanError(None, "scan called without a current row")
        if len(targets) != len(self._row):
            raise ScanError(
                None,
                f"expected {len(self._row)} destination arguments, not {len(targets)}",
            )
        columns = self.columns()
        staged = []
        for name, target, value in zip(columns, targets, self._row, strict=True):
            try:
                staged.append(target.convert(value) if isinstance(target, BaseTarget) else value)
            except (ValueError, TypeError) as e:
                raise ScanError(name, str(e)) from e

        for name, target, value in zip(columns, targets, staged, strict=True):
            try:
                if isinstance(target, BaseTarget):
                    target.store(value)
                else:
                    target.set(value)
            except (ValueError, TypeError) as e:
                raise ScanError(name, str(e)) from e

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._row = None
            self._raw.close()

    def _check_open(self) -> None:
        if self._closed:
            raise ExecutionError("cursor is closed")
