"""Scan target protocol.

A scan target is a writable location that a cursor copies one column's
value into. Anything with a ``set(value)`` method qualifies.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ScanTarget(Protocol):
    """Writable destination for a single column value."""

    def set(self, value: Any) -> None:
        """Store a value read from the current row."""
        ...
