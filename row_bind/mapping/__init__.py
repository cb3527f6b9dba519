"""Mapping layer - bind result columns to record fields."""

from __future__ import annotations

from row_bind.mapping.columns import map_columns
from row_bind.mapping.fields import column, column_field
from row_bind.mapping.plan import FieldPlan, RecordPlan, compile_plan, is_record, is_record_type
from row_bind.mapping.protocol import ScanTarget
from row_bind.mapping.targets import DISCARD, AttributeTarget, BaseTarget, Cell, Discard, ref

__all__ = [
    "map_columns",
    "column",
    "column_field",
    "compile_plan",
    "is_record",
    "is_record_type",
    "FieldPlan",
    "RecordPlan",
    "ScanTarget",
    "AttributeTarget",
    "BaseTarget",
    "Cell",
    "Discard",
    "DISCARD",
    "ref",
]
