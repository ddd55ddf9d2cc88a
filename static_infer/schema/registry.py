"""
Named schema registry.

Holds the schemas declared in one source file. Names are declared up front so
that a type can point at another one declared further down the file.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from .fragment import ref_fragment

logger = logging.getLogger(__name__)


class NamedSchemaRegistry:
    """Mapping from declared type/schema name to its fragment.

    Registering a name twice keeps the later fragment and records a warning.
    """

    def __init__(self, ref_prefix: str = "#/components/schemas/", warnings: list[str] | None = None):
        self.ref_prefix = ref_prefix
        self.warnings = warnings if warnings is not None else []
        self._declared: set[str] = set()
        self._schemas: dict[str, dict[str, Any]] = {}

    def declare(self, name: str) -> None:
        """Make a name referenceable before its fragment is known."""
        self._declared.add(name)

    def is_declared(self, name: str) -> bool:
        return name in self._declared or name in self._schemas

    def register(self, name: str, schema: dict[str, Any]) -> None:
        if name in self._schemas:
            self.warnings.append(f"Schema name collision: {name} (later definition wins)")
            logger.debug("schema %s redefined", name)
        self._declared.add(name)
        self._schemas[name] = schema

    def ref(self, name: str) -> dict[str, Any]:
        """Reference fragment for a declared name."""
        return ref_fragment(name, self.ref_prefix)

    def get(self, name: str) -> dict[str, Any] | None:
        return self._schemas.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._schemas

    def __iter__(self) -> Iterator[str]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return dict(self._schemas)
