"""
Black formatter for the generated tree.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ..config import FormatterConfig
from .base import Formatter, FormatResult


class BlackFormatter(Formatter):
    """Formatter using the black library API."""

    name = "black"

    def __init__(self):
        self._black = None
        self._available = None

    def is_available(self) -> bool:
        """Check if black is installed."""
        if self._available is None:
            try:
                import black

                self._black = black
                self._available = True
            except ImportError:
                self._available = False
        return self._available

    def mode(self, config: FormatterConfig):
        black = self._black
        target_versions = set()
        version = getattr(black.TargetVersion, config.target_version.upper(), None) if config.target_version else None
        if version is not None:
            target_versions.add(version)
        return black.Mode(target_versions=target_versions, line_length=config.line_length)

    def format_tree(self, root: Path, paths: Sequence[Path], config: FormatterConfig) -> FormatResult:
        if not self.is_available():
            return FormatResult(ok=False, message="black is not installed")

        black = self._black
        mode = self.mode(config)
        for path in paths:
            try:
                black.format_file_in_place(path, fast=False, mode=mode, write_back=black.WriteBack.YES)
            except (black.InvalidInput, OSError) as e:
                return FormatResult(ok=False, message=f"black failed on {path.relative_to(root)}: {e}")
        return FormatResult(ok=True)
