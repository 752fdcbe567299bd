"""
Ruff based formatters: `ruff format` and the `ruff check` verification pass.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

from ..config import FormatterConfig
from .base import Formatter, FormatResult

# Syntax errors and undefined names only; style rules do not apply to generated code
VERIFY_RULES = "E9,F63,F7,F82"


class RuffFormatter(Formatter):
    """Formatter using `ruff format`."""

    name = "ruff"

    def __init__(self, timeout: float = 120):
        self.timeout = timeout
        self._available = None

    def is_available(self) -> bool:
        """Check if ruff is installed."""
        if self._available is None:
            try:
                result = subprocess.run(
                    ["ruff", "--version"],
                    capture_output=True,
                    text=True,
                    timeout=5,
                )
                self._available = result.returncode == 0
            except (subprocess.SubprocessError, FileNotFoundError):
                self._available = False
        return self._available

    def command(self, root: Path, config: FormatterConfig) -> list[str]:
        cmd = ["ruff", "format", "--no-cache"]
        if config.line_length:
            cmd.extend(["--line-length", str(config.line_length)])
        if config.target_version:
            cmd.extend(["--target-version", config.target_version])
        cmd.append(str(root))
        return cmd

    def format_tree(self, root: Path, paths: Sequence[Path], config: FormatterConfig) -> FormatResult:
        if not self.is_available():
            return FormatResult(ok=False, message="ruff is not installed")
        try:
            result = subprocess.run(
                self.command(root, config),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                cwd=root,
            )
        except subprocess.SubprocessError as e:
            return FormatResult(ok=False, message=f"ruff did not complete: {e}")
        if result.returncode != 0:
            output = (result.stderr or result.stdout).strip()
            return FormatResult(ok=False, message=f"ruff exited with code {result.returncode}: {output}")
        return FormatResult(ok=True)


class VerifyFormatter(RuffFormatter):
    """Checks the tree with `ruff check` without rewriting anything."""

    name = "verify"

    def command(self, root: Path, config: FormatterConfig) -> list[str]:
        cmd = ["ruff", "check", "--no-cache", "--select", VERIFY_RULES]
        if config.target_version:
            cmd.extend(["--target-version", config.target_version])
        cmd.append(str(root))
        return cmd
