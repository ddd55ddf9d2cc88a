from __future__ import annotations

import pytest

from static_infer.syntax import TREE_SITTER_AVAILABLE, SourceParser


@pytest.fixture(scope="session")
def parser():
    """Create a TypeScript parser using tree-sitter."""
    if not TREE_SITTER_AVAILABLE:
        pytest.skip("tree-sitter-typescript not installed")
    return SourceParser()
