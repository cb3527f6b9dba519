"""Record binding plans.

A plan lists a record type's fields in declaration order together with the
column each field is bound to. Plans depend only on the record type, so
they are compiled once per type and cached.

Three declaration styles are recognised:

1. ``__columns__`` on the class: ordered ``(column, attribute)`` pairs. A
   ``None`` column marks an attribute holding a nested record (or a list of
   records). Takes precedence over the styles below.
2. Pydantic models: ``json_schema_extra={"column": ...}`` on the field,
   usually via :func:`row_bind.mapping.fields.column_field`.
3. Dataclasses: ``metadata={"column": ...}`` on the field, usually via
   :func:`row_bind.mapping.fields.column`.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from pydantic import BaseModel

from row_bind.core.exceptions import PlanCompilationError
from row_bind.mapping.fields import COLUMN_KEY
from row_bind.mapping.targets import TypeConverter, converter_for


@dataclass(frozen=True)
class FieldPlan:
    """A single declared field of a record type.

    ``nested`` is the record type an untagged field holds, taken from its
    annotation; ``many`` marks a list of such records. Tagged fields are
    always leaves.
    """

    attribute: str
    column: str | None
    converter: TypeConverter | None = None
    nested: type | None = None
    many: bool = False


@dataclass(frozen=True)
class RecordPlan:
    """Compiled, validated binding plan for a record type."""

    record_type: type
    fields: tuple[FieldPlan, ...]

    @property
    def columns(self) -> list[str]:
        """Columns bound directly by this type, excluding nested records."""
        return [f.column for f in self.fields if f.column is not None]


def is_record(obj: Any) -> bool:
    """Return True if *obj* is a record instance the mapper can introspect."""
    if isinstance(obj, type):
        return False
    if isinstance(obj, BaseModel):
        return True
    if dataclasses.is_dataclass(obj):
        return True
    return hasattr(type(obj), "__columns__")


def is_record_type(cls: Any) -> bool:
    """Return True if *cls* is a class whose instances are records."""
    if not isinstance(cls, type) or typing.get_origin(cls) is not None:
        return False
    if issubclass(cls, BaseModel) or dataclasses.is_dataclass(cls):
        return True
    return hasattr(cls, "__columns__")


def _strip_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _nested_type(annotation: Any) -> tuple[type | None, bool]:
    """Resolve the record type held by a field, and whether it is a list of them."""
    annotation = _strip_optional(annotation)
    if is_record_type(annotation):
        return annotation, False
    if typing.get_origin(annotation) in (list, tuple, Sequence):
        args = [a for a in typing.get_args(annotation) if a is not Ellipsis]
        if len(args) == 1:
            item = _strip_optional(args[0])
            if is_record_type(item):
                return item, True
    return None, False


def _field_plan(attribute: str, column: str | None, annotation: Any) -> FieldPlan:
    if column is not None:
        return FieldPlan(attribute=attribute, column=column, converter=converter_for(annotation))
    nested, many = _nested_type(annotation)
    return FieldPlan(attribute=attribute, column=None, nested=nested, many=many)


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        # Unresolvable forward references: bind without type conversion.
        return {}


def _explicit_fields(cls: type) -> list[FieldPlan]:
    declared = cls.__columns__  # type: ignore[attr-defined]
    hints = _type_hints(cls)
    fields = []
    for entry in declared:
        if not isinstance(entry, tuple) or len(entry) != 2:
            raise PlanCompilationError(
                f"{cls.__name__}.__columns__ entries must be (column, attribute) pairs, "
                f"got {entry!r}"
            )
        col, attr = entry
        fields.append(_field_plan(attr, col, hints.get(attr)))
    return fields


def _pydantic_fields(cls: type[BaseModel]) -> list[FieldPlan]:
    fields = []
    for name, info in cls.model_fields.items():
        extra = info.json_schema_extra
        col = extra.get(COLUMN_KEY) if isinstance(extra, dict) else None
        fields.append(_field_plan(name, col, info.annotation))  # type: ignore[arg-type]
    return fields


def _dataclass_fields(cls: type) -> list[FieldPlan]:
    hints = _type_hints(cls)
    return [
        _field_plan(f.name, f.metadata.get(COLUMN_KEY), hints.get(f.name))
        for f in dataclasses.fields(cls)
    ]


def _check_writable(cls: type) -> None:
    if issubclass(cls, BaseModel):
        frozen = cls.model_config.get("frozen", False)
    elif dataclasses.is_dataclass(cls):
        frozen = cls.__dataclass_params__.frozen  # type: ignore[attr-defined]
    else:
        frozen = False
    if frozen:
        raise PlanCompilationError(f"{cls.__name__} is frozen and cannot be scanned into")


@lru_cache(maxsize=None)
def compile_plan(record_type: type) -> RecordPlan:
    """Compile the binding plan for *record_type*.

    Raises:
        PlanCompilationError: the type is frozen, has a malformed
            ``__columns__`` declaration, or binds one column to two fields.
    """
    _check_writable(record_type)

    if hasattr(record_type, "__columns__"):
        fields = _explicit_fields(record_type)
    elif issubclass(record_type, BaseModel):
        fields = _pydantic_fields(record_type)
    elif dataclasses.is_dataclass(record_type):
        fields = _dataclass_fields(record_type)
    else:
        raise PlanCompilationError(
            f"{record_type.__name__} declares no column bindings: use a dataclass, "
            "a Pydantic model, or define __columns__"
        )

    seen: dict[str, str] = {}
    for f in fields:
        if f.column is None:
            continue
        if f.column in seen:
            raise PlanCompilationError(
                f"Column '{f.column}' is bound to both '{seen[f.column]}' and "
                f"'{f.attribute}' in {record_type.__name__}"
            )
        seen[f.column] = f.attribute

    return RecordPlan(record_type=record_type, fields=tuple(fields))
