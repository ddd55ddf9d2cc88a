"""
Atomic writer for planned mock files.

A planned file is written to a temporary file next to its target, validated,
and only then moved into place, so an interrupted run never leaves half a
mock behind.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

from .config import MockFormat
from .errors import MockWriteError
from .extract.results import MockWritePlan
from .syntax import SourceParser


class MockFileWriter:
    """Writes ``MockWritePlan`` files atomically.

    JSON mocks must parse as JSON. TypeScript mocks are checked for syntax
    errors when a parser is supplied.
    """

    def __init__(self, parser: SourceParser | None = None):
        """Initialize the writer.

        Args:
            parser: Parser used to validate TypeScript mocks (skipped when None)
        """
        self._parser = parser

    def write(self, plan: MockWritePlan, validate: bool = True) -> Path:
        """Write a planned file.

        Args:
            plan: The planned file
            validate: Whether to validate before finalizing

        Returns:
            Path of the written file

        Raises:
            MockWriteError: If validation fails
            OSError: If file operations fail
        """
        path = Path(plan.path)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory keeps the final rename on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", text=True)
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(plan.content)
            if validate:
                self.validate(plan)
            temp_path.replace(path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise
        return path

    def write_if_not_exists(self, plan: MockWritePlan, validate: bool = True) -> bool:
        """Write a planned file unless its target already exists.

        Returns:
            True if the file was written, False if it already existed
        """
        if Path(plan.path).exists():
            return False
        self.write(plan, validate)
        return True

    def validate(self, plan: MockWritePlan) -> None:
        """
        Check the content of a planned file.

        Raises:
            MockWriteError: If the content is not valid for its format
        """
        if MockFormat(plan.format) == MockFormat.JSON:
            try:
                json.loads(plan.content)
            except ValueError as e:
                raise MockWriteError(f"Mock {plan.path} is not valid JSON: {e}") from e
        elif self._parser is not None:
            tree = self._parser.parse_file(plan.path, plan.content)
            if tree.has_error:
                raise MockWriteError(f"Mock {plan.path} has syntax errors")
