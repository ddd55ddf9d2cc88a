"""
Configuration for static inference.

A single dataclass carries the names the evaluator recognises structurally
(schema-builder namespace, fixture namespace, handler wrappers, plugin calls)
plus the few numeric limits. It can be loaded from a JSON config file the same
way for the CLI and for library callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class MockFormat(str, Enum):
    """Output format of a planned mock file."""

    TS = "ts"
    JSON = "json"


@dataclass
class InferenceConfig:
    """Configuration options for the static evaluator and its call sites."""

    # Nesting depth after which a branch degrades to an unresolved marker
    max_depth: int = 64

    # Upper bound on arrays produced by Array.from(...)
    max_array_length: int = 1000

    # Root identifier of the schema-builder DSL (z.object(...), z.string(), ...)
    schema_namespace: str = "z"

    # Sub-namespace of the DSL whose calls map like root calls (z.coerce.number())
    coerce_namespace: str = "coerce"

    # Namespace of deterministic fixture generators (faker.string.numeric(...))
    fixture_namespace: str = "faker"

    # Calls that wrap a route handler (defineHandler(...), m.defineHandler(...))
    define_handler_names: list[str] = field(default_factory=lambda: ["defineHandler"])

    # Plugin calls whose first argument carries the entries option
    plugin_call_names: list[str] = field(default_factory=lambda: ["mokup"])

    # Config wrappers that simply return their first argument
    config_wrapper_names: list[str] = field(default_factory=lambda: ["defineConfig"])

    # Location named schema references point at
    schema_ref_prefix: str = "#/components/schemas/"

    # Directory path.resolve() anchors relative segments at
    base_dir: str = "/"

    @staticmethod
    def from_dict(d: dict) -> InferenceConfig:
        """Create a config from a dictionary, ignoring unknown keys."""
        config = InferenceConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "max_depth": self.max_depth,
            "max_array_length": self.max_array_length,
            "schema_namespace": self.schema_namespace,
            "coerce_namespace": self.coerce_namespace,
            "fixture_namespace": self.fixture_namespace,
            "define_handler_names": self.define_handler_names,
            "plugin_call_names": self.plugin_call_names,
            "config_wrapper_names": self.config_wrapper_names,
            "schema_ref_prefix": self.schema_ref_prefix,
            "base_dir": self.base_dir,
        }


@dataclass
class MockWriteOptions:
    """Options for planning mock files.

    Attributes:
        format: Output format of every planned file
        ts_template: Optional jinja2 template string for TypeScript mocks
        json_template: Optional jinja2 template string for JSON mocks
        method: HTTP method used for schema mocks
        base_path: Route path schema mocks are placed under
        generation_comment: Whether TypeScript mocks start with a generation comment
        generation_command: Command line quoted in the generation comment
    """

    format: MockFormat = MockFormat.TS
    ts_template: str | None = None
    json_template: str | None = None
    method: str = "get"
    base_path: str = "/schema"
    generation_comment: bool = False
    generation_command: str = "static_infer"
