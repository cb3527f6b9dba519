"""Column mapper.

Turns a scan destination into the ordered list of scan targets a cursor
fills for one row. Destinations are either a flat list of targets, used
as-is, or records whose fields declare the column they bind to.

Nested records are flattened into their parent: their fields bind as if
declared on the parent in place of the nested attribute. Attributes holding
a list of records are walked element by element.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from row_bind.core.enums import BindMode
from row_bind.core.exceptions import (
    BindingError,
    MissingColumnError,
    UnsupportedDestinationError,
)
from row_bind.mapping.plan import compile_plan, is_record
from row_bind.mapping.protocol import ScanTarget
from row_bind.mapping.targets import DISCARD, AttributeTarget


def _is_record_list(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) > 0
        and all(is_record(item) for item in value)
    )


def _is_target_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(
        not is_record(item) and isinstance(item, ScanTarget) for item in value
    )


def _instantiate(record: Any, attribute: str, nested: type) -> Any:
    """Create an empty *nested* record and attach it to *record*."""
    try:
        value = nested()
    except (TypeError, ValueError) as e:
        raise BindingError(
            f"Field '{attribute}' of {type(record).__name__} is None and "
            f"{nested.__name__} cannot be created without arguments: {e}"
        ) from e
    setattr(record, attribute, value)
    return value


class _Binder:
    """Fills one target list, tracking the write cursor across records."""

    def __init__(self, columns: Sequence[str], mode: BindMode) -> None:
        self.columns = list(columns)
        self.mode = mode
        self.targets: list[ScanTarget | None] = [None] * len(self.columns)
        self.position = 0

    def walk(self, record: Any) -> None:
        plan = compile_plan(type(record))
        for field in plan.fields:
            if field.column is not None:
                self.bind(field.column, AttributeTarget(record, field.attribute, field.converter))
                continue

            value = getattr(record, field.attribute, None)
            if field.nested is not None and not field.many and value is None:
                value = _instantiate(record, field.attribute, field.nested)
            if is_record(value):
                self.walk(value)
            elif _is_record_list(value):
                for item in value:
                    self.walk(item)

    def bind(self, column: str, target: ScanTarget) -> None:
        try:
            index = self.columns.index(column)
        except ValueError:
            raise MissingColumnError(column, self.columns) from None

        if self.mode is BindMode.BY_NAME:
            slot = index
        else:
            slot = self.position
            self.position += 1

        if slot >= len(self.targets):
            raise BindingError(
                f"Destination binds more fields than the {len(self.columns)} "
                f"result columns {self.columns}"
            )
        if self.targets[slot] is not None:
            raise BindingError(f"Column '{self.columns[slot]}' is bound more than once")
        self.targets[slot] = target

    def result(self) -> list[ScanTarget]:
        return [DISCARD if t is None else t for t in self.targets]


def map_columns(
    columns: Sequence[str],
    destination: Any,
    mode: BindMode = BindMode.BY_NAME,
) -> list[ScanTarget]:
    """Build the ordered scan-target list for one row.

    Args:
        columns: Result column names, in result order.
        destination: A list of scan targets (returned unchanged), a record,
            or a list of records.
        mode: Target placement. BY_NAME places each field at its matched
            column; BY_POSITION places fields in declaration order and only
            checks that their column exists.

    Returns:
        One target per column. Columns no field binds receive a target that
        discards the value.

    Raises:
        MissingColumnError: A field's column is absent from *columns*.
        BindingError: A column would be bound twice, or more fields than
            columns are bound.
        UnsupportedDestinationError: *destination* has an unsupported shape.
    """
    if _is_target_list(destination):
        return list(destination)

    binder = _Binder(columns, mode)
    if is_record(destination):
        binder.walk(destination)
    elif _is_record_list(destination):
        for record in destination:
            binder.walk(record)
    else:
        raise UnsupportedDestinationError(destination)
    return binder.result()
