"""
Post-processing formatters for the generated tree.
"""

from __future__ import annotations

from ..config import FormatMode
from .base import Formatter, FormatResult
from .black_formatter import BlackFormatter
from .ruff_formatter import RuffFormatter, VerifyFormatter


def get_formatter(mode: FormatMode) -> Formatter | None:
    """Return the formatter of a mode, or None when formatting is disabled."""
    if mode is FormatMode.VERIFY:
        return VerifyFormatter()
    if mode is FormatMode.RUFF:
        return RuffFormatter()
    if mode is FormatMode.BLACK:
        return BlackFormatter()
    return None


__all__ = [
    "BlackFormatter",
    "FormatResult",
    "Formatter",
    "RuffFormatter",
    "VerifyFormatter",
    "get_formatter",
]
