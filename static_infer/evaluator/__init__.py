"""
Static expression evaluator.

Reduces declarative TypeScript/JavaScript expressions to JSON-compatible
values, with ``Unresolved`` markers standing in for whatever is dynamic.
"""

from __future__ import annotations

from .environment import EMPTY, Binding, Environment, ExprBinding, ValueBinding, module_environment
from .evaluator import Evaluator
from .markers import ABSENT, EXPR, FUNCTION, Unresolved, contains_unresolved, is_unresolved
from .returns import FunctionReturnAnalyzer

__all__ = [
    "ABSENT",
    "EMPTY",
    "EXPR",
    "FUNCTION",
    "Binding",
    "Environment",
    "Evaluator",
    "ExprBinding",
    "FunctionReturnAnalyzer",
    "Unresolved",
    "ValueBinding",
    "contains_unresolved",
    "is_unresolved",
    "module_environment",
]
