"""
Unresolved markers.

A marker is a placeholder for an expression the evaluator could not reduce.
Markers are ``str`` subclasses so a partially static structure stays
JSON-serialisable, while ``is_unresolved`` still tells them apart from a real
string that happens to look like ``<expr>``.
"""

from __future__ import annotations

from typing import Any


class Unresolved(str):
    """A placeholder carrying the text of what could not be resolved."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Unresolved({str.__repr__(self)})"

    @classmethod
    def named(cls, name: str) -> Unresolved:
        """Marker for an unbound identifier or shorthand property."""
        return cls(f"<{name}>")

    @property
    def label(self) -> str:
        """The identifier/expression text inside the angle brackets."""
        return str(self)[1:-1]


EXPR = Unresolved("<expr>")
FUNCTION = Unresolved("<function>")


def is_unresolved(value: Any) -> bool:
    return isinstance(value, Unresolved)


def contains_unresolved(value: Any) -> bool:
    """Check whether a marker appears anywhere inside a value."""
    if isinstance(value, Unresolved):
        return True
    if isinstance(value, list):
        return any(contains_unresolved(item) for item in value)
    if isinstance(value, dict):
        return any(contains_unresolved(item) for item in value.values())
    return False


class _Absent:
    """Sentinel for "nothing could be produced" (distinct from JSON ``null``)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()
