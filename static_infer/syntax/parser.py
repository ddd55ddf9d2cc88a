"""
Syntax tree provider.

Uses tree-sitter and tree-sitter-typescript to turn source text into a node
tree. The rest of the package treats the tree as read-only input and only
depends on tree-sitter node kinds, never on parser internals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..errors import ParserUnavailableError

# Try to import tree-sitter
try:
    import tree_sitter_typescript as ts_typescript
    from tree_sitter import Language, Parser

    TREE_SITTER_AVAILABLE = True
except ImportError:
    TREE_SITTER_AVAILABLE = False
    Language = None
    Parser = None

logger = logging.getLogger(__name__)

# Sentinel for "load the parser on demand" in entry point signatures
AUTO = "auto"

TSX_SUFFIXES = (".tsx", ".jsx")


@dataclass
class SourceTree:
    """A parsed source file.

    Attributes:
        root: The ``program`` node
        source: The text that was parsed
    """

    root: Any
    source: str

    @property
    def has_error(self) -> bool:
        return bool(self.root.has_error)


class SourceParser:
    """Parser for TypeScript/JavaScript source files.

    Requires tree-sitter and tree-sitter-typescript packages.
    """

    def __init__(self):
        """Initialize both grammars.

        Raises:
            ParserUnavailableError: If tree-sitter is not available
        """
        if not TREE_SITTER_AVAILABLE:
            raise ParserUnavailableError("tree-sitter and tree-sitter-typescript are required for source parsing. Install with: pip install tree-sitter tree-sitter-typescript")

        self._ts_parser = Parser(Language(ts_typescript.language_typescript()))
        self._tsx_parser = Parser(Language(ts_typescript.language_tsx()))

    def parse(self, source: str, tsx: bool = False) -> SourceTree:
        """Parse source text.

        tree-sitter recovers from syntax errors, so this never fails on bad
        input; the resulting tree simply contains ERROR nodes.

        Args:
            source: Source text
            tsx: Use the TSX grammar (JSX allowed, ``<T>expr`` assertions not)

        Returns:
            SourceTree wrapping the ``program`` node
        """
        parser = self._tsx_parser if tsx else self._ts_parser
        tree = parser.parse(bytes(source, "utf8"))
        if tree.root_node.has_error:
            logger.debug("source parsed with syntax errors; continuing on the recovered tree")
        return SourceTree(root=tree.root_node, source=source)

    def parse_file(self, file_name: str, source: str) -> SourceTree:
        """Parse source text, picking the grammar from the file name."""
        return self.parse(source, tsx=file_name.lower().endswith(TSX_SUFFIXES))


def load_parser() -> SourceParser | None:
    """Return a parser, or ``None`` when the capability is missing."""
    try:
        return SourceParser()
    except ParserUnavailableError as e:
        logger.info("%s", e)
        return None


def resolve_parser(parser: SourceParser | str | None) -> SourceParser | None:
    """Turn an entry point's ``parser`` argument into a parser or ``None``."""
    if parser == AUTO:
        return load_parser()
    return parser
