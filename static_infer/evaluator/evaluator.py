"""
Expression evaluator.

Reduces a syntax node to a JSON-compatible value without executing anything.
Whatever cannot be reduced statically becomes an ``Unresolved`` marker, so a
partially static literal still comes back as a well-formed structure.

Dispatch is a closed table keyed by tree-sitter node kind; kinds that are not
in the table reduce to ``<expr>``.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable

from ..config import InferenceConfig
from ..syntax.nodes import (
    named_children,
    node_text,
    number_value,
    property_name,
    string_value,
    template_parts,
    unwrap,
)
from ..utils import (
    is_number,
    js_loose_equals,
    js_strict_equals,
    js_to_number,
    js_to_string,
    js_truthy,
    normalize_number,
    to_json,
)
from .builtins import CallBuiltins
from .environment import EMPTY, Binding, Environment, ValueBinding
from .markers import ABSENT, EXPR, FUNCTION, Unresolved, is_unresolved
from .returns import FunctionReturnAnalyzer

logger = logging.getLogger(__name__)

_ARITHMETIC_OPERATORS = {"-", "*", "/", "%"}
_RELATIONAL_OPERATORS = {
    "<": lambda a, b: a < b,
    ">": lambda a, b: a > b,
    "<=": lambda a, b: a <= b,
    ">=": lambda a, b: a >= b,
}


class Evaluator:
    """Tree-walking reducer from expression nodes to JSON-compatible values.

    One evaluator serves one call site invocation. It collects warnings for
    the caller and keeps track of the bindings it is currently resolving so
    that self-referencing declarations degrade to markers.
    """

    def __init__(self, config: InferenceConfig | None = None, warnings: list[str] | None = None):
        """
        Initialize the evaluator.

        Args:
            config: Inference configuration (defaults apply when omitted)
            warnings: List to append warnings to (a fresh one when omitted)
        """
        self.config = config or InferenceConfig()
        self.warnings = warnings if warnings is not None else []
        self.returns = FunctionReturnAnalyzer(self)
        self.calls = CallBuiltins(self)
        self._resolving: set[tuple[int, int]] = set()
        self._depth_warned = False
        self._handlers: dict[str, Callable[[Any, Environment, int], Any]] = {
            "string": self._eval_string,
            "number": self._eval_number,
            "true": lambda node, env, depth: True,
            "false": lambda node, env, depth: False,
            "null": lambda node, env, depth: None,
            "undefined": lambda node, env, depth: None,
            "template_string": self._eval_template,
            "array": self._eval_array,
            "object": self.evaluate_object,
            "identifier": self._eval_identifier,
            "unary_expression": self._eval_unary,
            "binary_expression": self._eval_binary,
            "ternary_expression": self._eval_conditional,
            "arrow_function": self._eval_function,
            "function_expression": self._eval_function,
            "function": self._eval_function,
            "call_expression": self._eval_call,
            "member_expression": self._eval_member,
            "subscript_expression": self._eval_subscript,
        }

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def evaluate(self, node: Any, env: Environment = EMPTY, depth: int = 0) -> Any:
        """
        Reduce an expression node.

        Args:
            node: Expression node (wrappers such as parentheses are looked through)
            env: Bindings visible to the expression
            depth: Current nesting depth

        Returns:
            A JSON-compatible value, possibly containing Unresolved markers
        """
        if node is None:
            return EXPR
        if depth > self.config.max_depth:
            if not self._depth_warned:
                self._depth_warned = True
                logger.debug("max depth %d reached at %s", self.config.max_depth, node.type)
                self.warn(f"Expression nesting exceeds max depth {self.config.max_depth}; branch left unresolved.")
            return EXPR
        node = unwrap(node)
        handler = self._handlers.get(node.type)
        if handler is None:
            return EXPR
        return handler(node, env, depth + 1)

    # --- Names ---

    def resolve_name(self, name: str, env: Environment, depth: int) -> Any:
        """Resolve an identifier; unbound names become ``<name>``."""
        found = env.resolve(name)
        if found is None:
            return Unresolved.named(name)
        binding, scope = found
        return self.resolve_binding(name, binding, scope, depth)

    def resolve_binding(self, name: str, binding: Binding, env: Environment, depth: int) -> Any:
        """Reduce a binding; ``env`` is the layer that declares it."""
        if isinstance(binding, ValueBinding):
            return binding.value
        key = (binding.node.start_byte, binding.node.end_byte)
        if key in self._resolving:
            # const a = [a] and friends
            return Unresolved.named(name)
        self._resolving.add(key)
        try:
            return self.evaluate(binding.node, env, depth)
        finally:
            self._resolving.discard(key)

    def _eval_identifier(self, node: Any, env: Environment, depth: int) -> Any:
        return self.resolve_name(node_text(node), env, depth)

    # --- Literals ---

    def _eval_string(self, node: Any, env: Environment, depth: int) -> Any:
        return string_value(node)

    def _eval_number(self, node: Any, env: Environment, depth: int) -> Any:
        value = number_value(node_text(node))
        return EXPR if value is None else value

    def _eval_template(self, node: Any, env: Environment, depth: int) -> Any:
        chunks, expressions = template_parts(node)
        parts = [chunks[0]]
        for expression, chunk in zip(expressions, chunks[1:]):
            value = self.evaluate(expression, env, depth)
            if is_unresolved(value):
                return EXPR
            if isinstance(value, (list, dict)):
                parts.append(to_json(value, indent=None))
            else:
                parts.append(js_to_string(value))
            parts.append(chunk)
        return "".join(parts)

    def _eval_array(self, node: Any, env: Environment, depth: int) -> Any:
        items: list[Any] = []
        for element in named_children(node):
            if element.type == "spread_element":
                children = named_children(element)
                spread = self.evaluate(children[0] if children else None, env, depth)
                if isinstance(spread, list):
                    items.extend(spread)
                else:
                    items.append(EXPR)
                continue
            items.append(self.evaluate(element, env, depth))
        return items

    def evaluate_object(self, node: Any, env: Environment, depth: int) -> dict[str, Any]:
        """Reduce an object literal property by property."""
        result: dict[str, Any] = {}
        for prop in named_children(node):
            if prop.type == "pair":
                key = self._pair_key(prop, env, depth)
                if key is None:
                    continue
                result[key] = self.evaluate(prop.child_by_field_name("value"), env, depth)
            elif prop.type == "shorthand_property_identifier":
                key = node_text(prop)
                result[key] = self.resolve_name(key, env, depth)
            elif prop.type == "spread_element":
                children = named_children(prop)
                spread = self.evaluate(children[0] if children else None, env, depth)
                if isinstance(spread, dict):
                    result.update(spread)
        return result

    def _pair_key(self, prop: Any, env: Environment, depth: int) -> str | None:
        key_node = prop.child_by_field_name("key")
        if key_node is None:
            return None
        if key_node.type == "computed_property_name":
            children = named_children(key_node)
            value = self.evaluate(children[0] if children else None, env, depth)
            if is_unresolved(value) or isinstance(value, (list, dict)):
                return None
            return js_to_string(value)
        return property_name(key_node)

    # --- Operators ---

    def _eval_unary(self, node: Any, env: Environment, depth: int) -> Any:
        operator = node.child_by_field_name("operator")
        value = self.evaluate(node.child_by_field_name("argument"), env, depth)
        if operator is None or is_unresolved(value):
            return EXPR
        op = operator.type
        if op == "!":
            return not js_truthy(value)
        if op in ("+", "-"):
            if isinstance(value, (list, dict)):
                return EXPR
            number = js_to_number(value)
            if number is None:
                return EXPR
            return number if op == "+" else normalize_number(-number)
        return EXPR

    def _eval_binary(self, node: Any, env: Environment, depth: int) -> Any:
        operator = node.child_by_field_name("operator")
        left = self.evaluate(node.child_by_field_name("left"), env, depth)
        right = self.evaluate(node.child_by_field_name("right"), env, depth)
        if operator is None or is_unresolved(left) or is_unresolved(right):
            return EXPR
        op = operator.type

        if op == "+":
            if isinstance(left, str) or isinstance(right, str):
                return js_to_string(left) + js_to_string(right)
            if is_number(left) and is_number(right):
                return self._finite(left + right)
            return EXPR

        if op in _ARITHMETIC_OPERATORS:
            if not (is_number(left) and is_number(right)):
                return EXPR
            if op == "-":
                return self._finite(left - right)
            if op == "*":
                return self._finite(left * right)
            if right == 0:
                return EXPR
            if op == "/":
                if isinstance(left, int) and isinstance(right, int) and left % right == 0:
                    return left // right
                return self._finite(left / right)
            # JavaScript % keeps the sign of the dividend
            return self._finite(math.fmod(left, right))

        if op in ("===", "!=="):
            equal = js_strict_equals(left, right)
            if equal is None:
                return EXPR
            return equal if op == "===" else not equal

        if op in ("==", "!="):
            equal = js_loose_equals(left, right)
            if equal is None:
                return EXPR
            return equal if op == "==" else not equal

        if op in _RELATIONAL_OPERATORS:
            if is_number(left) and is_number(right):
                return _RELATIONAL_OPERATORS[op](left, right)
            return EXPR

        if op == "&&":
            return right if js_truthy(left) else left
        if op == "||":
            return left if js_truthy(left) else right
        if op == "??":
            return right if left is None else left

        return EXPR

    def _finite(self, value: int | float) -> Any:
        if isinstance(value, float) and not math.isfinite(value):
            return EXPR
        return normalize_number(value)

    def _eval_conditional(self, node: Any, env: Environment, depth: int) -> Any:
        condition = self.evaluate(node.child_by_field_name("condition"), env, depth)
        if is_unresolved(condition):
            return EXPR
        branch = "consequence" if js_truthy(condition) else "alternative"
        return self.evaluate(node.child_by_field_name(branch), env, depth)

    # --- Functions and calls ---

    def _eval_function(self, node: Any, env: Environment, depth: int) -> Any:
        returned = self.returns.find_return(node, env, depth=depth)
        return FUNCTION if returned is ABSENT else returned

    def _eval_call(self, node: Any, env: Environment, depth: int) -> Any:
        return self.calls.evaluate(node, env, depth)

    # --- Property access on reduced values ---

    def _eval_member(self, node: Any, env: Environment, depth: int) -> Any:
        prop = node.child_by_field_name("property")
        if prop is None or prop.type != "property_identifier":
            return EXPR
        target = node.child_by_field_name("object")
        if target is None or unwrap(target).type not in ("identifier", "member_expression", "subscript_expression", "object", "array"):
            return EXPR
        value = self.evaluate(target, env, depth)
        return self._access(value, node_text(prop))

    def _eval_subscript(self, node: Any, env: Environment, depth: int) -> Any:
        value = self.evaluate(node.child_by_field_name("object"), env, depth)
        index = self.evaluate(node.child_by_field_name("index"), env, depth)
        if is_unresolved(index) or isinstance(index, (list, dict)):
            return EXPR
        return self._access(value, index)

    def _access(self, value: Any, key: Any) -> Any:
        if is_unresolved(value):
            return EXPR
        if isinstance(value, dict):
            name = js_to_string(key)
            return value[name] if name in value else EXPR
        if isinstance(value, (list, str)):
            if key == "length":
                return len(value)
            if is_number(key) and float(key).is_integer() and 0 <= key < len(value):
                return value[int(key)]
        return EXPR
