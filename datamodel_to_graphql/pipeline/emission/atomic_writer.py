"""
Atomic file writer for the generated tree.

Ensures that an interrupted run never leaves a truncated module behind:
every file is written to a temporary sibling, validated, then moved into
place.
"""

from __future__ import annotations

import ast
import tempfile
from collections.abc import Callable
from pathlib import Path

from ..errors import EmissionError, OutputWriteError


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content (Python sources only)
    3. Atomically replace the target file
    """

    def __init__(self, validate_python: Callable[[str, Path], None] | None = None, stage: str | None = None):
        """Initialize the atomic writer.

        Args:
            validate_python: Optional validation function for Python sources
            stage: Pipeline stage reported by write errors (usually the block name)
        """
        self._validate_python = validate_python or self._default_validate_python
        self.stage = stage

    def write(self, path: Path, content: str | bytes, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Text or bytes to write
            validate: Whether to parse Python sources before finalizing

        Raises:
            OutputWriteError: If a directory or file operation fails
            EmissionError: If a Python source does not parse
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputWriteError(f"Cannot create directory ({e.strerror})", path.parent, stage=self.stage) from e

        if validate and path.suffix == ".py":
            self._validate_python(content if isinstance(content, str) else content.decode("utf-8"), path)

        data = content.encode("utf-8") if isinstance(content, str) else content
        try:
            # Same directory ensures atomic rename on the same filesystem
            temp_fd, temp_path_str = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        except OSError as e:
            raise OutputWriteError(f"Cannot write file ({e.strerror})", path, stage=self.stage) from e

        temp_path = Path(temp_path_str)
        try:
            with open(temp_fd, "wb") as f:
                f.write(data)
            temp_path.replace(path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise OutputWriteError(f"Cannot write file ({e.strerror})", path, stage=self.stage) from e

    def _default_validate_python(self, content: str, path: Path) -> None:
        """Check that a generated module parses.

        Raises:
            EmissionError: If the source is not valid Python
        """
        try:
            ast.parse(content, filename=str(path))
        except SyntaxError as e:
            raise EmissionError(f"Generated module {path.name} is not valid Python: {e}", stage=self.stage or "validate") from e
