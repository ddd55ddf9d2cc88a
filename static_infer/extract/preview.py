"""
Mock payload preview.

Turns a mock file into the JSON it would most likely respond with: JSON files
are parsed, script files have their ``export default`` reduced statically.
When nothing can be reduced the raw text is shown instead.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from ..config import InferenceConfig
from ..evaluator import ABSENT, FUNCTION, Environment, Evaluator, ExprBinding, ValueBinding, contains_unresolved, module_environment
from ..syntax import AUTO, SourceParser, resolve_parser
from ..syntax.nodes import FUNCTION_TYPES, call_arguments, callee_name, first_named_child, has_token, named_children, node_text, unwrap
from ..utils import to_json
from .results import PARSED_EXPORT_DEFAULT, PARSED_JSON, RAW_JSON_FAILED, RAW_SOURCE, PreviewResult, ValueResult

logger = logging.getLogger(__name__)

JSON_EXTENSIONS = ("json", "jsonc")
SCRIPT_EXTENSIONS = ("ts", "js", "mjs", "cjs")


def extract_default_export(
    source: str,
    parser: SourceParser | str | None = AUTO,
    config: InferenceConfig | None = None,
    file_name: str = "mock.ts",
) -> ValueResult:
    """
    Reduce the ``export default`` of a module.

    Module-level ``const`` declarations are visible to the exported
    expression. The first default export whose reduction is defined wins.

    Args:
        source: Module source text
        parser: Parser to use, ``AUTO`` to load one, or None for no parser
        config: Inference configuration
        file_name: Used to pick the TSX grammar for .tsx/.jsx files

    Returns:
        ValueResult with ``ok`` false when nothing could be reduced
    """
    parser = resolve_parser(parser)
    if parser is None:
        return ValueResult(ok=False)
    tree = parser.parse_file(file_name, source)
    evaluator = Evaluator(config)
    env = module_environment(tree.root)
    for stmt in named_children(tree.root):
        if stmt.type != "export_statement" or not has_token(stmt, "default"):
            continue
        value = _exported_value(evaluator, stmt.child_by_field_name("value"), env, 0)
        if value is not ABSENT:
            return ValueResult(ok=True, value=value, meta=PARSED_EXPORT_DEFAULT)
    return ValueResult(ok=False)


def _exported_value(evaluator: Evaluator, node: Any, env: Environment, depth: int) -> Any:
    node = unwrap(node)
    if node is None or depth > evaluator.config.max_depth:
        return ABSENT
    if node.type == "identifier":
        found = env.resolve(node_text(node))
        if found is None:
            return ABSENT
        binding, scope = found
        if isinstance(binding, ValueBinding):
            return binding.value
        if isinstance(binding, ExprBinding):
            return _exported_value(evaluator, binding.node, scope, depth + 1)
        return ABSENT
    if node.type == "object":
        return evaluator.evaluate_object(node, env, depth)
    if node.type == "call_expression":
        if callee_name(node) in evaluator.config.define_handler_names:
            returned = evaluator.calls.handler_return(node, env, depth)
            if returned is not ABSENT and returned is not FUNCTION:
                return returned
        args = call_arguments(node)
        if args and unwrap(args[0]).type in FUNCTION_TYPES:
            return evaluator.returns.find_return(unwrap(args[0]), env, depth=depth)
    return ABSENT


def parse_jsonc(raw: str, parser: SourceParser | str | None = AUTO, config: InferenceConfig | None = None) -> ValueResult:
    """Parse JSON with comments and trailing commas.

    The text is reduced as a single parenthesised expression; anything that
    does not reduce to a fully static value is a failure.
    """
    parser = resolve_parser(parser)
    if parser is None:
        return ValueResult(ok=False)
    tree = parser.parse(f"({raw}\n)")
    statements = named_children(tree.root)
    if tree.has_error or len(statements) != 1 or statements[0].type != "expression_statement":
        return ValueResult(ok=False)
    value = Evaluator(config).evaluate(first_named_child(statements[0]))
    if contains_unresolved(value):
        return ValueResult(ok=False)
    return ValueResult(ok=True, value=value, meta=PARSED_JSON)


def parse_json_like(raw: str, parser: SourceParser | str | None = AUTO, config: InferenceConfig | None = None) -> ValueResult:
    try:
        return ValueResult(ok=True, value=json.loads(raw), meta=PARSED_JSON)
    except ValueError:
        return parse_jsonc(raw, parser, config)


def build_preview(
    source_file: str,
    raw: str,
    parser: SourceParser | str | None = AUTO,
    config: InferenceConfig | None = None,
) -> PreviewResult:
    """
    Build the preview text of a mock file.

    Args:
        source_file: File name; its extension selects the strategy
        raw: File content
        parser: Parser to use, ``AUTO`` to load one, or None for no parser
        config: Inference configuration

    Returns:
        PreviewResult with pretty-printed JSON, or the raw text on failure
    """
    ext = os.path.splitext(source_file)[1].lstrip(".").lower()
    if ext in JSON_EXTENSIONS:
        parsed = parse_json_like(raw, parser, config)
        if parsed.ok:
            return PreviewResult(text=to_json(parsed.value), meta=PARSED_JSON)
        logger.debug("could not parse %s as json", source_file)
        return PreviewResult(text=raw, meta=RAW_JSON_FAILED)

    if ext in SCRIPT_EXTENSIONS:
        parsed = extract_default_export(raw, parser, config, file_name=source_file)
        if parsed.ok:
            return PreviewResult(text=to_json(parsed.value), meta=parsed.meta)
        logger.debug("no static default export in %s", source_file)

    return PreviewResult(text=raw, meta=RAW_SOURCE)
