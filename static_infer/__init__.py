"""Static inference of runtime-shaped data from TypeScript/JavaScript source

Reduces declarative source (mock handlers, build-tool configs, schema-builder
chains, declared types) to JSON values and JSON Schemas without executing it.
Whatever cannot be reduced statically comes back as an unresolved marker or a
warning.
"""

__version__ = "0.1.0"

from .config import InferenceConfig, MockFormat, MockWriteOptions
from .errors import MockWriteError, ParserUnavailableError, StaticInferError, TemplateRenderError
from .evaluator import Evaluator, Unresolved
from .extract import (
    ConfigEntry,
    build_preview,
    detect_entries,
    extract_default_export,
    extract_schemas,
    merge_schema_maps,
    parse_entries,
    plan_mock_writes_for_routes,
    plan_mock_writes_for_schemas,
    route_from_file,
)
from .syntax import AUTO, SourceParser, load_parser

__all__ = [
    "AUTO",
    "ConfigEntry",
    "Evaluator",
    "InferenceConfig",
    "MockFormat",
    "MockWriteError",
    "MockWriteOptions",
    "ParserUnavailableError",
    "SourceParser",
    "StaticInferError",
    "TemplateRenderError",
    "Unresolved",
    "build_preview",
    "detect_entries",
    "extract_default_export",
    "extract_schemas",
    "load_parser",
    "merge_schema_maps",
    "parse_entries",
    "plan_mock_writes_for_routes",
    "plan_mock_writes_for_schemas",
    "route_from_file",
]
