"""
Function return analyzer.

Finds the value a function "produces" without running it. Expression-bodied
arrows are reduced directly. For block bodies every ``return <expr>`` outside
nested functions is collected and one is picked:

1. the last object-literal return
2. else the last identifier return that resolves through the scope
3. else the last return of any kind

This is an approximation of control flow: no branch is executed, so a later
``return {...}`` wins over an earlier one even if the earlier one would be
reached at runtime. Object literals carry the most shape for mock payloads.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from ..syntax.nodes import NESTED_SCOPE_TYPES, first_named_child, named_children, node_text, unwrap, walk
from .environment import Binding, Environment, ExprBinding, ValueBinding, body_const_bindings
from .markers import ABSENT, Unresolved

if TYPE_CHECKING:
    from .evaluator import Evaluator

_PARAMETER_WRAPPERS = {"required_parameter", "optional_parameter"}


class FunctionReturnAnalyzer:
    """Picks and reduces the operative return value of a function node."""

    def __init__(self, evaluator: Evaluator):
        self.evaluator = evaluator

    def find_return(self, fn: Any, env: Environment, param_values: Sequence[Any] | None = None, depth: int = 0) -> Any:
        """
        Reduce the value a function returns.

        Args:
            fn: Arrow function, function expression or method definition
            env: Scope the function is defined in
            param_values: Values bound positionally to the parameters
            depth: Current nesting depth

        Returns:
            The reduced value, or ABSENT when there is no return expression
        """
        body = fn.child_by_field_name("body")
        if body is None:
            return ABSENT
        local_env = self.function_environment(fn, env, param_values)
        if body.type != "statement_block":
            return self.evaluator.evaluate(body, local_env, depth)

        last_object = None
        last_identifier = None
        last_expr = None
        for expr in self.collect_returns(body):
            inner = unwrap(expr)
            last_expr = expr
            if inner.type == "object":
                last_object = inner
            elif inner.type == "identifier":
                last_identifier = inner

        if last_object is not None:
            return self.evaluator.evaluate_object(last_object, local_env, depth)
        if last_identifier is not None:
            name = node_text(last_identifier)
            found = local_env.resolve(name)
            if found is not None:
                binding, scope = found
                return self.evaluator.resolve_binding(name, binding, scope, depth)
        if last_expr is not None:
            return self.evaluator.evaluate(last_expr, local_env, depth)
        return ABSENT

    def collect_returns(self, body: Any) -> list[Any]:
        """Return expressions of ``return`` statements, in source order."""
        results = []
        for node in walk(body, NESTED_SCOPE_TYPES):
            if node.type != "return_statement":
                continue
            expr = first_named_child(node)
            if expr is not None:
                results.append(expr)
        return results

    def function_environment(self, fn: Any, env: Environment, param_values: Sequence[Any] | None = None) -> Environment:
        """Build the scope of a function body.

        Parameters are bound to the supplied values; a parameter without a
        value falls back to its default expression, or to a marker carrying its
        name so it shadows outer bindings inside the body. Outer declarations
        are reduced in their own scope and never see these parameters.
        ``const`` declarations of the body are added last and win over
        parameters of the same name.
        """
        bindings: dict[str, Binding] = {}
        for index, (name, default) in enumerate(self.parameters(fn)):
            if name is None:
                continue
            if param_values is not None and index < len(param_values) and param_values[index] is not None:
                bindings[name] = ValueBinding(param_values[index])
            elif default is not None:
                bindings[name] = ExprBinding(default)
            elif param_values is not None and index < len(param_values):
                bindings[name] = ValueBinding(None)
            else:
                bindings[name] = ValueBinding(Unresolved.named(name))
        body = fn.child_by_field_name("body")
        if body is not None and body.type == "statement_block":
            bindings.update(body_const_bindings(body, NESTED_SCOPE_TYPES))
        return env.extend(bindings)

    def parameters(self, fn: Any) -> list[tuple[str | None, Any | None]]:
        """Return ``(name, default)`` per parameter; destructured names are ``None``."""
        single = fn.child_by_field_name("parameter")
        if single is not None:
            return [(node_text(single), None) if single.type == "identifier" else (None, None)]
        params = fn.child_by_field_name("parameters")
        if params is None:
            return []
        result: list[tuple[str | None, Any | None]] = []
        for param in named_children(params):
            pattern = param
            default = None
            if param.type in _PARAMETER_WRAPPERS:
                pattern = param.child_by_field_name("pattern")
                default = param.child_by_field_name("value")
            elif param.type == "assignment_pattern":
                pattern = param.child_by_field_name("left")
                default = param.child_by_field_name("right")
            if pattern is not None and pattern.type == "identifier":
                result.append((node_text(pattern), default))
            else:
                result.append((None, None))
        return result
