"""
Schema fragments.

A fragment is a plain JSON Schema dict. The ``optional`` flag that chain
reduction needs travels next to the schema in ``ChainResult`` and never ends
up inside the emitted dict. Fragments are never mutated after construction;
merges build new dicts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..utils import js_typeof

NULL_SCHEMA = {"type": "null"}


@dataclass(frozen=True)
class ChainResult:
    """Result of reducing one schema-builder chain.

    Attributes:
        schema: The JSON Schema fragment
        optional: Whether the value may be left out of an enclosing object
    """

    schema: dict[str, Any]
    optional: bool = False

    def with_optional(self, optional: bool = True) -> ChainResult:
        return ChainResult(self.schema, optional)


def is_object_schema(schema: dict[str, Any]) -> bool:
    return schema.get("type") == "object"


def object_schema(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    """Build an object fragment, leaving ``required`` out when nothing is required."""
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def nullable_schema(schema: dict[str, Any]) -> dict[str, Any]:
    return {"anyOf": [schema, dict(NULL_SCHEMA)]}


def literal_schema(value: Any) -> dict[str, Any]:
    """Fragment for a literal value: ``{"type": typeof value, "const": value}``."""
    if value is None:
        return dict(NULL_SCHEMA)
    return {"type": js_typeof(value), "const": value}


def ref_fragment(name: str, prefix: str) -> dict[str, Any]:
    return {"$ref": f"{prefix}{name}"}


def merge_object_schemas(base: ChainResult, other: ChainResult) -> ChainResult:
    """Merge two object fragments.

    Properties are united with ``other`` winning on a key collision. The
    required lists are concatenated in first-seen order without duplicates.
    If either side is not an object schema the base comes back unchanged.

    Args:
        base: Fragment being extended
        other: Extension shape or merged schema

    Returns:
        A new ChainResult (the optional flag is not carried over)
    """
    if not is_object_schema(base.schema) or not is_object_schema(other.schema):
        return base
    properties = {**base.schema.get("properties", {}), **other.schema.get("properties", {})}
    required: list[str] = []
    for name in list(base.schema.get("required", [])) + list(other.schema.get("required", [])):
        if name not in required:
            required.append(name)
    return ChainResult(object_schema(properties, required))
