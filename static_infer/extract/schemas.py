"""
Schema extraction from declaration files.

Interfaces and type aliases are reduced first, then top-level declarations
whose initialiser is a schema-builder chain. A chain declared under the same
name as a type replaces it.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..config import InferenceConfig
from ..evaluator import EMPTY, Evaluator, ValueBinding, module_environment
from ..schema import NamedSchemaRegistry, SchemaChainBuilder, TypeSchemaBuilder
from ..schema.type_nodes import DECLARATION_TYPES
from ..syntax import AUTO, SourceParser, resolve_parser
from ..syntax.nodes import declarators, node_text, top_level_statements
from .results import SchemaResult

logger = logging.getLogger(__name__)

PARSER_MISSING = "TypeScript parser not available; schema parsing skipped."
NO_SCHEMAS = "No schemas parsed from source."

VARIABLE_DECLARATION_TYPES = ("lexical_declaration", "variable_declaration")


def extract_schemas(
    source: str,
    parser: SourceParser | str | None = AUTO,
    config: InferenceConfig | None = None,
    file_name: str = "types.ts",
) -> SchemaResult:
    """
    Extract named JSON Schemas from a source file.

    Args:
        source: Source text (a .d.ts or a module declaring schema-builder consts)
        parser: Parser to use, ``AUTO`` to load one, or None for no parser
        config: Inference configuration
        file_name: Used to pick the grammar

    Returns:
        SchemaResult; never raises for source content
    """
    config = config or InferenceConfig()
    parser = resolve_parser(parser)
    if parser is None:
        return SchemaResult(schemas={}, warnings=[PARSER_MISSING])

    tree = parser.parse_file(file_name, source)
    warnings: list[str] = []
    registry = NamedSchemaRegistry(config.schema_ref_prefix, warnings)
    statements = list(top_level_statements(tree.root))

    declarations = [stmt for stmt in statements if stmt.type in DECLARATION_TYPES]
    for stmt in declarations:
        name = stmt.child_by_field_name("name")
        if name is not None:
            registry.declare(node_text(name))

    types = TypeSchemaBuilder(registry, config)
    for stmt in declarations:
        name = stmt.child_by_field_name("name")
        if name is None:
            continue
        if stmt.type == "type_alias_declaration" and types.is_schema_inference(stmt.child_by_field_name("value"), config.schema_namespace):
            continue
        schema = types.schema_from_declaration(stmt)
        if schema is not None:
            registry.register(node_text(name), schema)

    chains = SchemaChainBuilder(Evaluator(config, warnings), module_environment(tree.root))
    env = EMPTY
    for stmt in statements:
        if stmt.type not in VARIABLE_DECLARATION_TYPES:
            continue
        for name, value in declarators(stmt):
            result = chains.schema_from_chain(value, env)
            if result is None:
                continue
            registry.register(name, result.schema)
            env = env.extend({name: ValueBinding(result)})

    if not len(registry):
        warnings.append(NO_SCHEMAS)
    logger.debug("%s: %d schema(s), %d warning(s)", file_name, len(registry), len(warnings))
    return SchemaResult(schemas=registry.to_dict(), warnings=warnings)


def merge_schema_maps(results: Iterable[SchemaResult]) -> SchemaResult:
    """Merge the results of several files; a later schema replaces an earlier one of the same name."""
    merged = SchemaResult()
    for result in results:
        merged.warnings.extend(result.warnings)
        for name, schema in result.schemas.items():
            if name in merged.schemas:
                merged.warnings.append(f"Duplicate schema name: {name}")
            merged.schemas[name] = schema
    return merged
