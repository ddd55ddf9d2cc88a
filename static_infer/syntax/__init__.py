"""
Syntax tree provider.

Parses TypeScript/JavaScript source with tree-sitter and offers read-only
helpers over the resulting nodes.
"""

from __future__ import annotations

from .parser import AUTO, TREE_SITTER_AVAILABLE, SourceParser, SourceTree, load_parser, resolve_parser

__all__ = [
    "AUTO",
    "TREE_SITTER_AVAILABLE",
    "SourceParser",
    "SourceTree",
    "load_parser",
    "resolve_parser",
]
