"""
Result types returned by the extraction call sites.

Every call site reports problems as warning strings next to whatever it did
manage to produce; none of these results ever represents an exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..config import MockFormat

# Preview meta labels
PARSED_JSON = "parsed json"
PARSED_EXPORT_DEFAULT = "parsed export default"
RAW_SOURCE = "raw source"
RAW_JSON_FAILED = "raw json (parse failed)"

ENTRY_MODES = ("server", "sw")


@dataclass
class ValueResult:
    """Outcome of a value extraction.

    ``value`` and ``meta`` are only meaningful when ``ok`` is true.
    """

    ok: bool = False
    value: Any = None
    meta: str = ""


@dataclass
class PreviewResult:
    """Text to show for a mock file, and how it was obtained."""

    text: str
    meta: str


@dataclass
class ConfigEntry:
    """One route-entry configuration from a build-tool config."""

    dir: str
    prefix: str | None = None
    watch: bool | None = None
    mode: str | None = None  # "server" or "sw"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary, leaving out absent keys."""
        result: dict[str, Any] = {"dir": self.dir}
        if self.prefix is not None:
            result["prefix"] = self.prefix
        if self.watch is not None:
            result["watch"] = self.watch
        if self.mode is not None:
            result["mode"] = self.mode
        return result


@dataclass
class EntriesResult:
    entries: list[ConfigEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"entries": [entry.to_dict() for entry in self.entries], "warnings": list(self.warnings)}


@dataclass
class SchemaResult:
    """Named schemas of one or more source files."""

    schemas: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"schemas": self.schemas, "warnings": list(self.warnings)}


@dataclass
class MockRoute:
    """A mock route derived from a file name (``users/[id].get.ts``)."""

    method: str
    path: str
    source_file: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"method": self.method, "path": self.path, "sourceFile": self.source_file}


@dataclass
class MockWritePlan:
    """One file a mock planner wants written."""

    path: str
    content: str
    format: MockFormat = MockFormat.TS


@dataclass
class MockWriteResult:
    files: list[MockWritePlan] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
