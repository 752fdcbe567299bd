"""
Base class for output tree formatters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..config import FormatterConfig


@dataclass(frozen=True)
class FormatResult:
    """Outcome of one formatter run."""

    ok: bool
    message: str = ""


class Formatter(ABC):
    """Abstract base class for formatters run over the generated tree."""

    name: str = ""

    @abstractmethod
    def format_tree(self, root: Path, paths: Sequence[Path], config: FormatterConfig) -> FormatResult:
        """
        Format or check the generated sources.

        Args:
            root: Root of the generated package
            paths: Every generated Python source, sorted
            config: Formatter configuration

        Returns:
            FormatResult; failures are reported, never raised
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the formatter is available (dependencies installed).

        Returns:
            True if the formatter can be used
        """
