"""
Type-node schema builder.

Maps declared TypeScript types (interfaces, type aliases and the type nodes
inside them) to JSON Schema fragments. Names declared in the same file become
``$ref`` fragments; anything unsupported becomes ``{}`` plus a warning.
Nesting past ``max_depth`` also degrades to ``{}``, with a single warning.
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import InferenceConfig
from ..syntax.nodes import first_named_child, has_token, named_children, node_text, number_value, property_name, string_value
from .fragment import object_schema
from .registry import NamedSchemaRegistry

logger = logging.getLogger(__name__)

PREDEFINED_SCHEMAS = {
    "string": {"type": "string"},
    "number": {"type": "number"},
    "boolean": {"type": "boolean"},
    "object": {"type": "object"},
    "any": {},
    "unknown": {},
}

ARRAY_GENERICS = ("Array", "ReadonlyArray")

# Declarations that can be referenced by name
DECLARATION_TYPES = ("interface_declaration", "type_alias_declaration")


class TypeSchemaBuilder:
    """Builds schema fragments from type nodes against a registry of named schemas."""

    def __init__(self, registry: NamedSchemaRegistry, config: InferenceConfig | None = None):
        self.registry = registry
        self.config = config or InferenceConfig()
        self._depth_warned = False

    def warn_unsupported(self, node: Any) -> dict[str, Any]:
        self.registry.warnings.append(f"Unsupported type node: {node_text(node)}")
        return {}

    def schema_from_declaration(self, node: Any) -> dict[str, Any] | None:
        """Reduce an ``interface`` or ``type`` declaration."""
        if node.type == "interface_declaration":
            return self.schema_from_interface(node.child_by_field_name("body"))
        if node.type == "type_alias_declaration":
            value = node.child_by_field_name("value")
            return self.schema_from_type_node(value) if value is not None else None
        return None

    def schema_from_interface(self, body: Any, depth: int = 0) -> dict[str, Any]:
        """Reduce interface members (or a type literal's members) to an object fragment.

        Only property signatures contribute; methods, index and call
        signatures are left out.

        Args:
            body: ``interface_body`` or ``object_type`` node
            depth: Current nesting depth

        Returns:
            ``{"type": "object", "properties": ..., "required": ...}``
        """
        properties: dict[str, Any] = {}
        required: list[str] = []
        for member in named_children(body) if body is not None else []:
            if member.type != "property_signature":
                continue
            key = property_name(member.child_by_field_name("name"))
            annotation = member.child_by_field_name("type")
            if key is None or annotation is None:
                continue
            type_node = first_named_child(annotation)
            if type_node is None:
                continue
            properties[key] = self.schema_from_type_node(type_node, depth + 1)
            if not has_token(member, "?"):
                required.append(key)
        return object_schema(properties, required)

    def schema_from_type_node(self, node: Any, depth: int = 0) -> dict[str, Any]:
        """
        Reduce a type node.

        Args:
            node: Any tree-sitter type node
            depth: Current nesting depth

        Returns:
            Schema fragment ({} for anything that cannot be expressed)
        """
        if depth > self.config.max_depth:
            if not self._depth_warned:
                self._depth_warned = True
                logger.debug("type nesting exceeds max depth %d at %s", self.config.max_depth, node.type)
                self.registry.warnings.append(f"Type nesting exceeds max depth {self.config.max_depth}; left as {{}}.")
            return {}
        depth += 1
        kind = node.type
        if kind == "predefined_type":
            schema = PREDEFINED_SCHEMAS.get(node_text(node))
            return dict(schema) if schema is not None else self.warn_unsupported(node)
        if kind == "literal_type":
            return self._literal_type(node)
        if kind in ("parenthesized_type", "readonly_type"):
            inner = first_named_child(node)
            return self.schema_from_type_node(inner, depth) if inner is not None else self.warn_unsupported(node)
        if kind == "array_type":
            element = first_named_child(node)
            return {"type": "array", "items": self.schema_from_type_node(element, depth) if element is not None else {}}
        if kind == "tuple_type":
            items = [self._tuple_member(member, depth) for member in named_children(node)]
            return {"type": "array", "items": items, "minItems": len(items), "maxItems": len(items)}
        if kind == "union_type":
            return {"oneOf": [self.schema_from_type_node(member, depth) for member in self._flatten(node, kind)]}
        if kind == "intersection_type":
            return {"allOf": [self.schema_from_type_node(member, depth) for member in self._flatten(node, kind)]}
        if kind == "object_type":
            return self.schema_from_interface(node, depth)
        if kind == "generic_type":
            return self._generic_type(node, depth)
        if kind == "type_identifier":
            return self._named_reference(node, node_text(node))
        return self.warn_unsupported(node)

    def is_schema_inference(self, node: Any, namespace: str) -> bool:
        """Check for ``z.infer<typeof X>`` style aliases (the schema const defines the name)."""
        if node is None or node.type != "generic_type":
            return False
        name = node.child_by_field_name("name")
        return name is not None and name.type == "nested_type_identifier" and node_text(name).startswith(f"{namespace}.")

    def _flatten(self, node: Any, kind: str) -> list[Any]:
        # A | B | C nests as ((A | B) | C); a leading | is allowed
        members: list[Any] = []
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type == kind:
                stack.extend(reversed(named_children(current)))
            else:
                members.append(current)
        return members

    def _literal_type(self, node: Any) -> dict[str, Any]:
        literal = first_named_child(node)
        if literal is None:
            return self.warn_unsupported(node)
        if literal.type == "string":
            return {"type": "string", "const": string_value(literal)}
        if literal.type in ("number", "unary_expression"):
            value = number_value(node_text(literal).replace(" ", ""))
            if value is not None:
                return {"type": "number", "const": value}
        if literal.type in ("true", "false"):
            return {"type": "boolean", "const": literal.type == "true"}
        if literal.type == "null":
            return {"type": "null"}
        return self.warn_unsupported(node)

    def _tuple_member(self, member: Any, depth: int) -> dict[str, Any]:
        if member.type in ("tuple_parameter", "optional_tuple_parameter", "required_parameter", "optional_parameter"):
            annotation = member.child_by_field_name("type")
            inner = first_named_child(annotation) if annotation is not None else None
            return self.schema_from_type_node(inner, depth) if inner is not None else {}
        if member.type in ("optional_type", "rest_type"):
            inner = first_named_child(member)
            return self.schema_from_type_node(inner, depth) if inner is not None else {}
        return self.schema_from_type_node(member, depth)

    def _generic_type(self, node: Any, depth: int) -> dict[str, Any]:
        name_node = node.child_by_field_name("name")
        arguments_node = node.child_by_field_name("type_arguments")
        arguments = named_children(arguments_node) if arguments_node is not None else []
        name = node_text(name_node) if name_node is not None else ""
        if name in ARRAY_GENERICS:
            return {"type": "array", "items": self.schema_from_type_node(arguments[0], depth) if arguments else {}}
        if name == "Record":
            additional = self.schema_from_type_node(arguments[1], depth) if len(arguments) > 1 else {}
            return {"type": "object", "additionalProperties": additional}
        return self._named_reference(node, name)

    def _named_reference(self, node: Any, name: str) -> dict[str, Any]:
        if self.registry.is_declared(name):
            return self.registry.ref(name)
        return self.warn_unsupported(node)
