"""
Recognised call expressions.

Calls are matched on the shape of their callee, never executed:

- handler wrappers (``defineHandler(fn)``, ``defineHandler({ handler })``)
  reduce to the handler's analysed return value
- ``Array.from(n | [...] | {length: n}, producer)`` builds the array by
  analysing the producer once per index
- fixture generators (``faker.string.numeric(n)``, ...) return fixed stub
  values so output is reproducible
- config helpers (``defineConfig(x)``, ``path.resolve(...)``,
  ``path.join(...)``) used by build-tool configuration files

Anything else reduces to ``<expr>``.
"""

from __future__ import annotations

import math
import posixpath
from typing import TYPE_CHECKING, Any

from ..syntax.nodes import FUNCTION_TYPES, call_arguments, callee_name, member_path, named_children, node_text, property_name, unwrap
from ..utils import is_number, js_to_string
from .environment import Environment, ExprBinding
from .markers import ABSENT, EXPR, FUNCTION, Unresolved, is_unresolved

if TYPE_CHECKING:
    from .evaluator import Evaluator

NUMERIC_DIGITS = "0123456789"

# Default length when faker.string.numeric() gets a non-numeric argument
DEFAULT_NUMERIC_LENGTH = 6

FIXTURE_STUBS = {
    "commerce.productName": "Sample Product",
    "person.fullName": "Sample Name",
    "internet.email": "user@example.com",
    "string.uuid": "00000000-0000-4000-8000-000000000000",
}

PATH_METHODS = {"resolve", "join"}


def make_numeric_string(length: int) -> str:
    """Return ``"0123456789012..."`` cut to ``length``."""
    return "".join(NUMERIC_DIGITS[i % len(NUMERIC_DIGITS)] for i in range(length))


class CallBuiltins:
    """Structural matcher and reducer for the recognised call shapes."""

    def __init__(self, evaluator: Evaluator):
        self.evaluator = evaluator
        self.config = evaluator.config

    def evaluate(self, node: Any, env: Environment, depth: int) -> Any:
        """Reduce a ``call_expression``; unrecognised calls give ``<expr>``."""
        name = callee_name(node)
        if name in self.config.define_handler_names:
            returned = self.handler_return(node, env, depth)
            if returned is not ABSENT:
                return returned

        callee = node.child_by_field_name("function")
        if name in self.config.config_wrapper_names and callee is not None and callee.type == "identifier":
            args = call_arguments(node)
            if args:
                return self.evaluator.evaluate(args[0], env, depth)

        path = member_path(callee) if callee is not None else None
        if path == ["Array", "from"]:
            return self.array_from(node, env, depth)
        if path is not None and len(path) == 2 and path[0] == "path" and path[1] in PATH_METHODS:
            return self.path_call(path[1], node, env, depth)
        if path is not None and len(path) > 1 and path[0] == self.config.fixture_namespace:
            return self.fixture_call(path, node, env, depth)
        return EXPR

    # --- Handler wrappers ---

    def handler_return(self, node: Any, env: Environment, depth: int) -> Any:
        """Return the analysed return value of the handler a wrapper call wraps.

        Returns:
            The reduced value, ``<function>`` when the handler has no usable
            return, or ABSENT when the argument is not a handler at all
        """
        args = call_arguments(node)
        if not args:
            return ABSENT
        arg = unwrap(args[0])
        found = self.resolve_function(arg, env)
        if found is None and arg.type == "object":
            handler = self.object_property(arg, "handler", env)
            if handler is not None:
                found = self.resolve_function(*handler)
        if found is None:
            return ABSENT
        fn, scope = found
        returned = self.evaluator.returns.find_return(fn, scope, depth=depth)
        return FUNCTION if returned is ABSENT else returned

    def resolve_function(self, node: Any, env: Environment) -> tuple[Any, Environment] | None:
        """Follow identifiers through ``const`` bindings to a function node.

        Returns:
            The function node and the scope it is declared in, or None
        """
        seen: set[str] = set()
        node = unwrap(node)
        while node is not None:
            if node.type in FUNCTION_TYPES or node.type == "method_definition":
                return node, env
            if node.type != "identifier":
                return None
            name = node_text(node)
            found = env.resolve(name)
            if name in seen or found is None or not isinstance(found[0], ExprBinding):
                return None
            seen.add(name)
            node = unwrap(found[0].node)
            env = found[1]
        return None

    def object_property(self, node: Any, key: str, env: Environment) -> tuple[Any, Environment] | None:
        """Return the value node of ``key`` in an object literal and the scope to reduce it in."""
        for prop in named_children(node):
            if prop.type == "pair" and property_name(prop.child_by_field_name("key")) == key:
                return prop.child_by_field_name("value"), env
            if prop.type == "method_definition" and property_name(prop.child_by_field_name("name")) == key:
                return prop, env
            if prop.type == "shorthand_property_identifier" and node_text(prop) == key:
                found = env.resolve(key)
                if found is not None and isinstance(found[0], ExprBinding):
                    return found[0].node, found[1]
        return None

    # --- Array.from ---

    def array_from(self, node: Any, env: Environment, depth: int) -> list[Any]:
        args = call_arguments(node)
        source = self._array_source(args[0] if args else None, env, depth)
        if source is None:
            return []
        length, elements = source
        if length > self.config.max_array_length:
            self.evaluator.warn(f"Array.from length {length} exceeds {self.config.max_array_length}; truncated.")
            length = self.config.max_array_length

        producer = self.resolve_function(args[1], env) if len(args) > 1 else None
        result: list[Any] = []
        for index in range(length):
            if producer is None:
                result.append(None)
                continue
            element = elements[index] if elements is not None and index < len(elements) else None
            returned = self.evaluator.returns.find_return(producer[0], producer[1], [element, index], depth=depth)
            result.append(None if returned is ABSENT else returned)
        return result

    def _array_source(self, node: Any, env: Environment, depth: int) -> tuple[int, list[Any] | None] | None:
        """Return ``(length, elements)`` of the first Array.from argument."""
        if node is None:
            return None
        node = unwrap(node)
        if node.type == "object":
            length = self.object_property(node, "length", env)
            if length is None:
                return None
            length_node, length_env = length
            return self._length(self.evaluator.evaluate(length_node, length_env, depth))
        value = self.evaluator.evaluate(node, env, depth)
        if isinstance(value, list):
            return len(value), value
        if isinstance(value, str) and not is_unresolved(value):
            return len(value), list(value)
        return self._length(value)

    def _length(self, value: Any) -> tuple[int, None] | None:
        if not is_number(value) or not math.isfinite(value):
            return None
        return max(0, math.floor(value)), None

    # --- Fixture generators ---

    def fixture_call(self, path: list[str], node: Any, env: Environment, depth: int) -> Any:
        method = ".".join(path[1:])
        if method == "string.numeric":
            args = call_arguments(node)
            length_value = self.evaluator.evaluate(args[0], env, depth) if args else 0
            if isinstance(length_value, dict):
                length_value = length_value.get("length")
            if is_number(length_value) and math.isfinite(length_value):
                return make_numeric_string(max(1, math.floor(length_value)))
            return make_numeric_string(DEFAULT_NUMERIC_LENGTH)
        if method in FIXTURE_STUBS:
            return FIXTURE_STUBS[method]
        return Unresolved.named(".".join(path))

    # --- path.resolve / path.join ---

    def path_call(self, method: str, node: Any, env: Environment, depth: int) -> Any:
        segments: list[str] = []
        for arg in call_arguments(node):
            value = self.evaluator.evaluate(arg, env, depth)
            if is_unresolved(value) or isinstance(value, (list, dict)) or value is None:
                self.evaluator.warn(f"path.{method} contains non-static value.")
                return EXPR
            segments.append(js_to_string(value))
        if method == "join":
            joined = "/".join(segment for segment in segments if segment)
            return posixpath.normpath(joined) if joined else "."
        resolved = self.config.base_dir
        for segment in segments:
            if segment:
                resolved = posixpath.join(resolved, segment)
        return posixpath.normpath(resolved)
