"""Binding tag declarations for record fields."""

from __future__ import annotations

import dataclasses
from typing import Any

from pydantic import Field

# Key under which the bound column name is stored in field metadata.
COLUMN_KEY = "column"


def column(name: str, **kwargs: Any) -> Any:
    """Declare a dataclass field bound to the column *name*.

    Accepts the same keyword arguments as :func:`dataclasses.field`::

        @dataclass
        class Comment:
            body: str = column("body", default="")
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[COLUMN_KEY] = name
    return dataclasses.field(metadata=metadata, **kwargs)


def column_field(name: str, *args: Any, **kwargs: Any) -> Any:
    """Declare a Pydantic model field bound to the column *name*.

    Positional and keyword arguments are forwarded to :func:`pydantic.Field`.
    """
    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    extra[COLUMN_KEY] = name
    return Field(*args, json_schema_extra=extra, **kwargs)
