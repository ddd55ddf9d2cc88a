"""
Exception types for static_infer.

Extraction entry points never raise for source content: unsupported constructs
become warnings or unresolved markers. These exceptions cover the few places
where a collaborator is missing or a user-supplied template is broken.
"""

from __future__ import annotations


class StaticInferError(Exception):
    """Base class for all static_infer errors."""

    pass


class ParserUnavailableError(StaticInferError):
    """Raised when the tree-sitter TypeScript grammar cannot be loaded.

    Callers that can degrade (every extraction entry point) go through
    ``load_parser`` instead, which turns this into ``None``.
    """

    pass


class TemplateRenderError(StaticInferError):
    """Raised when a mock template cannot be compiled or rendered."""

    def __init__(self, message: str, template_name: str = ""):
        super().__init__(message)
        self.template_name = template_name


class MockWriteError(StaticInferError):
    """Raised when a planned mock file fails validation before it is written."""

    pass
