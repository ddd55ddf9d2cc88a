"""
Call-chain schema builder.

Reduces fluent schema-builder chains such as

    z.object({ id: z.string(), name: z.string().optional() }).extend({ ... })

to JSON Schema fragments. A chain is walked from its last call back to its
root; calls on the namespace root (``z.string()``, ``z.coerce.number()``)
produce the base fragment and each chained method rewrites it.

``.nullable()`` only widens the fragment to accept ``null``; an optional
flag set earlier in the chain is kept. So ``z.string().optional().nullable()``
stays out of the ``required`` list of its object, while ``.nullish()`` always
makes the key optional.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..evaluator import EMPTY, Environment, Evaluator, ValueBinding, is_unresolved
from ..syntax.nodes import call_arguments, member_path, named_children, node_text, property_name, unwrap
from .fragment import ChainResult, literal_schema, merge_object_schemas, nullable_schema, object_schema

logger = logging.getLogger(__name__)

# Methods that leave the fragment as it is
PASSTHROUGH_METHODS = ("transform", "refine", "superRefine", "default", "catch", "brand", "describe")


class SchemaChainBuilder:
    """Reducer from schema-builder call chains to ``ChainResult`` values.

    The chain environment passed to ``schema_from_chain`` maps names of
    previously reduced chains to ``ValueBinding(ChainResult)``, so a chain
    can continue from a const declared earlier in the file. Literal
    arguments (``z.literal(...)``, ``z.enum([...])``) are reduced with the
    evaluator against the module's value environment.
    """

    def __init__(self, evaluator: Evaluator, values: Environment = EMPTY):
        self.evaluator = evaluator
        self.config = evaluator.config
        self.values = values
        self._depth_warned = False
        self._roots: dict[str, Callable[[list[Any], Environment, int], ChainResult | None]] = {
            "string": lambda args, env, depth: ChainResult({"type": "string"}),
            "number": lambda args, env, depth: ChainResult({"type": "number"}),
            "boolean": lambda args, env, depth: ChainResult({"type": "boolean"}),
            "date": lambda args, env, depth: ChainResult({"type": "string", "format": "date-time"}),
            "null": lambda args, env, depth: ChainResult({"type": "null"}),
            "any": lambda args, env, depth: ChainResult({}),
            "unknown": lambda args, env, depth: ChainResult({}),
            "array": self._root_array,
            "tuple": self._root_tuple,
            "object": self._root_object,
            "strictObject": self._root_object,
            "looseObject": self._root_object,
            "record": self._root_record,
            "enum": self._root_enum,
            "union": self._root_union,
            "discriminatedUnion": self._root_discriminated_union,
            "literal": self._root_literal,
            "preprocess": self._root_preprocess,
            "optional": self._root_optional,
            "nullable": self._root_nullable,
        }
        self._modifiers: dict[str, Callable[[Any, list[Any], Environment, int], ChainResult | None]] = {
            "optional": self._optional,
            "nullable": self._nullable,
            "nullish": self._nullish,
            "extend": self._extend,
            "merge": self._merge,
            "pipe": self._pipe,
            "array": self._array,
            "or": self._or,
            "and": self._and,
        }
        for method in PASSTHROUGH_METHODS:
            self._modifiers[method] = self._passthrough

    def schema_from_chain(self, node: Any, env: Environment = EMPTY, depth: int = 0) -> ChainResult | None:
        """
        Reduce a chain expression.

        Args:
            node: Expression node (a call chain or an identifier naming one)
            env: Previously reduced chains by name
            depth: Current nesting depth

        Returns:
            ChainResult, or None if the expression is not a recognised chain
        """
        if node is None:
            return None
        if depth > self.config.max_depth:
            if not self._depth_warned:
                self._depth_warned = True
                logger.debug("chain nesting exceeds max depth %d", self.config.max_depth)
                self.evaluator.warn(f"Schema chain nesting exceeds max depth {self.config.max_depth}; chain skipped.")
            return None
        node = unwrap(node)

        if node.type == "identifier":
            binding = env.lookup(node_text(node))
            if isinstance(binding, ValueBinding) and isinstance(binding.value, ChainResult):
                return binding.value
            return None

        if node.type != "call_expression":
            return None
        callee = unwrap(node.child_by_field_name("function"))
        if callee is None or callee.type != "member_expression":
            return None
        prop = callee.child_by_field_name("property")
        if prop is None:
            return None
        method = node_text(prop)
        target = callee.child_by_field_name("object")
        args = call_arguments(node)

        if self.is_root(target):
            root = self._roots.get(method)
            return root(args, env, depth + 1) if root else None

        modifier = self._modifiers.get(method)
        if modifier is not None:
            return modifier(target, args, env, depth + 1)
        # .min(), .email(), .int() and friends keep the base fragment
        return self.schema_from_chain(target, env, depth + 1)

    def is_root(self, node: Any) -> bool:
        """Check for ``z`` or ``z.coerce``."""
        path = member_path(unwrap(node)) if node is not None else None
        namespace = self.config.schema_namespace
        return path == [namespace] or path == [namespace, self.config.coerce_namespace]

    def schema_from_shape(self, node: Any, env: Environment, depth: int) -> ChainResult:
        """Reduce an object shape; keys whose fragment is optional are not required."""
        properties: dict[str, Any] = {}
        required: list[str] = []
        for prop in named_children(node):
            if prop.type == "pair":
                key = property_name(prop.child_by_field_name("key"))
                value = prop.child_by_field_name("value")
            elif prop.type == "shorthand_property_identifier":
                key = node_text(prop)
                value = prop
            else:
                continue
            if key is None:
                continue
            result = self._shape_member(value, env, depth)
            if result is None:
                continue
            properties[key] = result.schema
            if not result.optional:
                required.append(key)
        return ChainResult(object_schema(properties, required))

    def _shape_member(self, value: Any, env: Environment, depth: int) -> ChainResult | None:
        if value.type == "shorthand_property_identifier":
            binding = env.lookup(node_text(value))
            if isinstance(binding, ValueBinding) and isinstance(binding.value, ChainResult):
                return binding.value
            return None
        return self.schema_from_chain(value, env, depth)

    def _schema_or_empty(self, node: Any, env: Environment, depth: int) -> dict[str, Any]:
        result = self.schema_from_chain(node, env, depth)
        return result.schema if result is not None else {}

    def _elements(self, node: Any) -> list[Any] | None:
        node = unwrap(node) if node is not None else None
        if node is None or node.type != "array":
            return None
        return [element for element in named_children(node) if element.type != "spread_element"]

    def _literal_value(self, node: Any) -> Any:
        return self.evaluator.evaluate(node, self.values)

    # --- Root calls ---

    def _root_array(self, args: list[Any], env: Environment, depth: int) -> ChainResult:
        items = self._schema_or_empty(args[0], env, depth) if args else {}
        return ChainResult({"type": "array", "items": items})

    def _root_tuple(self, args: list[Any], env: Environment, depth: int) -> ChainResult:
        elements = self._elements(args[0]) if args else None
        if elements is None:
            return ChainResult({"type": "array"})
        items = [self._schema_or_empty(element, env, depth) for element in elements]
        return ChainResult({"type": "array", "items": items, "minItems": len(items), "maxItems": len(items)})

    def _root_object(self, args: list[Any], env: Environment, depth: int) -> ChainResult:
        shape = unwrap(args[0]) if args else None
        if shape is None or shape.type != "object":
            return ChainResult({"type": "object"})
        return self.schema_from_shape(shape, env, depth)

    def _root_record(self, args: list[Any], env: Environment, depth: int) -> ChainResult:
        value_type = args[1] if len(args) > 1 else (args[0] if args else None)
        additional = self._schema_or_empty(value_type, env, depth) if value_type is not None else {}
        schema: dict[str, Any] = {"type": "object", "additionalProperties": additional}
        if len(args) > 1:
            key_type = self.schema_from_chain(args[0], env, depth)
            if key_type is not None:
                schema["propertyNames"] = key_type.schema
        return ChainResult(schema)

    def _root_enum(self, args: list[Any], env: Environment, depth: int) -> ChainResult:
        values = self._literal_value(args[0]) if args else None
        if not isinstance(values, list):
            return ChainResult({"type": "string"})
        members = [value for value in values if isinstance(value, str) and not is_unresolved(value)]
        return ChainResult({"type": "string", "enum": members})

    def _root_union(self, args: list[Any], env: Environment, depth: int) -> ChainResult:
        elements = self._elements(args[0]) if args else None
        if elements is None:
            return ChainResult({})
        return ChainResult({"oneOf": [self._schema_or_empty(element, env, depth) for element in elements]})

    def _root_discriminated_union(self, args: list[Any], env: Environment, depth: int) -> ChainResult:
        elements = self._elements(args[1]) if len(args) > 1 else None
        if elements is None:
            return ChainResult({})
        schema: dict[str, Any] = {"oneOf": [self._schema_or_empty(element, env, depth) for element in elements]}
        key = self._literal_value(args[0])
        if isinstance(key, str) and not is_unresolved(key):
            schema["discriminator"] = {"propertyName": key}
        return ChainResult(schema)

    def _root_literal(self, args: list[Any], env: Environment, depth: int) -> ChainResult:
        value = self._literal_value(args[0]) if args else None
        if not args or is_unresolved(value) or isinstance(value, (list, dict)):
            return ChainResult({})
        return ChainResult(literal_schema(value))

    def _root_preprocess(self, args: list[Any], env: Environment, depth: int) -> ChainResult:
        if not args:
            return ChainResult({})
        schema_arg = args[1] if len(args) > 1 else args[0]
        return self.schema_from_chain(schema_arg, env, depth) or ChainResult({})

    def _root_optional(self, args: list[Any], env: Environment, depth: int) -> ChainResult | None:
        base = self.schema_from_chain(args[0], env, depth) if args else None
        return base.with_optional() if base is not None else None

    def _root_nullable(self, args: list[Any], env: Environment, depth: int) -> ChainResult | None:
        base = self.schema_from_chain(args[0], env, depth) if args else None
        return ChainResult(nullable_schema(base.schema), base.optional) if base is not None else None

    # --- Chained modifiers ---

    def _optional(self, target: Any, args: list[Any], env: Environment, depth: int) -> ChainResult | None:
        base = self.schema_from_chain(target, env, depth)
        return base.with_optional() if base is not None else None

    def _nullable(self, target: Any, args: list[Any], env: Environment, depth: int) -> ChainResult | None:
        base = self.schema_from_chain(target, env, depth)
        if base is None:
            return None
        return ChainResult(nullable_schema(base.schema), base.optional)

    def _nullish(self, target: Any, args: list[Any], env: Environment, depth: int) -> ChainResult | None:
        base = self.schema_from_chain(target, env, depth)
        if base is None:
            return None
        return ChainResult(nullable_schema(base.schema), True)

    def _extend(self, target: Any, args: list[Any], env: Environment, depth: int) -> ChainResult | None:
        base = self.schema_from_chain(target, env, depth)
        shape = unwrap(args[0]) if args else None
        if base is None or shape is None or shape.type != "object":
            return base
        return merge_object_schemas(base, self.schema_from_shape(shape, env, depth))

    def _merge(self, target: Any, args: list[Any], env: Environment, depth: int) -> ChainResult | None:
        base = self.schema_from_chain(target, env, depth)
        other = self.schema_from_chain(args[0], env, depth) if args else None
        if base is None or other is None:
            return base or other
        return merge_object_schemas(base, other)

    def _pipe(self, target: Any, args: list[Any], env: Environment, depth: int) -> ChainResult | None:
        if args:
            piped = self.schema_from_chain(args[0], env, depth)
            if piped is not None:
                return piped
        return self.schema_from_chain(target, env, depth)

    def _passthrough(self, target: Any, args: list[Any], env: Environment, depth: int) -> ChainResult | None:
        return self.schema_from_chain(target, env, depth)

    def _array(self, target: Any, args: list[Any], env: Environment, depth: int) -> ChainResult | None:
        base = self.schema_from_chain(target, env, depth)
        if base is None:
            return None
        return ChainResult({"type": "array", "items": base.schema})

    def _or(self, target: Any, args: list[Any], env: Environment, depth: int) -> ChainResult | None:
        return self._combine("oneOf", target, args, env, depth)

    def _and(self, target: Any, args: list[Any], env: Environment, depth: int) -> ChainResult | None:
        return self._combine("allOf", target, args, env, depth)

    def _combine(self, keyword: str, target: Any, args: list[Any], env: Environment, depth: int) -> ChainResult | None:
        base = self.schema_from_chain(target, env, depth)
        other = self.schema_from_chain(args[0], env, depth) if args else None
        if base is None or other is None:
            return base
        return ChainResult({keyword: [base.schema, other.schema]})
