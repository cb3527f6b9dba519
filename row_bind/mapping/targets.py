"""Concrete scan targets.

Converters validate the raw driver value against a declared Python type
with a Pydantic TypeAdapter before it is stored.
"""

from __future__ import annotations

import typing
from typing import Any, Callable

from pydantic import PydanticSchemaGenerationError, TypeAdapter


class TypeConverter:
    """Validate raw values against a declared type."""

    __slots__ = ("annotation", "_adapter")

    def __init__(self, annotation: Any) -> None:
        self.annotation = annotation
        self._adapter: TypeAdapter[Any] = TypeAdapter(annotation)

    def __call__(self, value: Any) -> Any:
        return self._adapter.validate_python(value)

    def __repr__(self) -> str:
        return f"TypeConverter({self.annotation!r})"


def converter_for(annotation: Any) -> TypeConverter | None:
    """Return a converter for *annotation*, or None when nothing to check."""
    if annotation is None or annotation is Any or isinstance(annotation, str):
        return None
    try:
        return TypeConverter(annotation)
    except PydanticSchemaGenerationError:
        # Types Pydantic has no schema for are stored unconverted.
        return None


class BaseTarget:
    """Scan target that converts a value before storing it.

    Cursors call :meth:`convert` for every column of a row before calling
    :meth:`store` on any of them, so a failed conversion leaves all
    destinations untouched.
    """

    __slots__ = ("converter",)

    def __init__(self, converter: Callable[[Any], Any] | None = None) -> None:
        self.converter = converter

    def convert(self, value: Any) -> Any:
        if self.converter is None:
            return value
        return self.converter(value)

    def store(self, value: Any) -> None:
        raise NotImplementedError

    def set(self, value: Any) -> None:
        self.store(self.convert(value))


class AttributeTarget(BaseTarget):
    """Writes the scanned value to ``obj.<name>``."""

    __slots__ = ("obj", "name")

    def __init__(
        self,
        obj: Any,
        name: str,
        converter: Callable[[Any], Any] | None = None,
    ) -> None:
        super().__init__(converter)
        self.obj = obj
        self.name = name

    def store(self, value: Any) -> None:
        setattr(self.obj, self.name, value)

    def __repr__(self) -> str:
        return f"AttributeTarget({type(self.obj).__name__}.{self.name})"


class Cell(BaseTarget):
    """Standalone holder for a single scanned value."""

    __slots__ = ("value",)

    def __init__(self, converter: Callable[[Any], Any] | None = None) -> None:
        super().__init__(converter)
        self.value: Any = None

    @classmethod
    def of(cls, annotation: Any) -> Cell:
        """Create a cell that validates values against *annotation*."""
        return cls(converter_for(annotation))

    def store(self, value: Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Cell({self.value!r})"


class Discard(BaseTarget):
    """Drops the value of a column no field is bound to."""

    __slots__ = ()

    def store(self, value: Any) -> None:
        pass

    def __repr__(self) -> str:
        return "DISCARD"


DISCARD = Discard()


def ref(obj: Any, name: str) -> AttributeTarget:
    """Reference ``obj.<name>`` as a scan target.

    The value is validated against the attribute's declared type when the
    class annotates it.
    """
    try:
        hints = typing.get_type_hints(type(obj))
    except (NameError, TypeError):
        hints = {}
    return AttributeTarget(obj, name, converter_for(hints.get(name)))
