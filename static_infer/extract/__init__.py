"""
Extraction call sites.

Each entry point takes source text plus an optional parser and returns a
result object with warnings; none of them raises for source content.
"""

from .entries import detect_entries, entries_from_value, parse_entries
from .fallback import scan_entries
from .mocks import MockRenderer, plan_mock_writes_for_routes, plan_mock_writes_for_schemas
from .preview import build_preview, extract_default_export, parse_jsonc
from .results import (
    ConfigEntry,
    EntriesResult,
    MockRoute,
    MockWritePlan,
    MockWriteResult,
    PreviewResult,
    SchemaResult,
    ValueResult,
)
from .routes import route_from_file, route_to_file_path
from .schemas import extract_schemas, merge_schema_maps

__all__ = [
    "ConfigEntry",
    "EntriesResult",
    "MockRenderer",
    "MockRoute",
    "MockWritePlan",
    "MockWriteResult",
    "PreviewResult",
    "SchemaResult",
    "ValueResult",
    "build_preview",
    "detect_entries",
    "entries_from_value",
    "extract_default_export",
    "extract_schemas",
    "merge_schema_maps",
    "parse_entries",
    "parse_jsonc",
    "plan_mock_writes_for_routes",
    "plan_mock_writes_for_schemas",
    "route_from_file",
    "route_to_file_path",
    "scan_entries",
]
