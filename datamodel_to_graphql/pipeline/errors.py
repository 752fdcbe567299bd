"""
Error taxonomy for the generation pipeline.

Every fatal error derives from GenerationError and carries the pipeline
stage it was raised in, so that an aborted run reports where it stopped.
"""

from __future__ import annotations

from pathlib import Path


class GenerationError(Exception):
    """Base class for fatal generation errors."""

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class ConfigError(GenerationError):
    """Raised when an option is invalid or conflicts with another one.

    Always raised while resolving the configuration, before any output is
    touched.
    """

    def __init__(self, message: str):
        super().__init__(message, stage="config")


class SchemaResolutionError(GenerationError):
    """Raised when a field references a type that does not exist."""

    def __init__(self, message: str, type_name: str = "", field_name: str = ""):
        super().__init__(message, stage="normalize")
        self.type_name = type_name
        self.field_name = field_name


class OutputWriteError(GenerationError, OSError):
    """Raised when a directory or file of the output tree cannot be written."""

    def __init__(self, message: str, path: Path | str, stage: str | None = None):
        GenerationError.__init__(self, f"{message}: {path}", stage=stage)
        self.path = Path(path)


class EmissionError(GenerationError):
    """Raised when a transpile batch or the declaration job fails."""

    def __init__(self, message: str, stage: str, batch_index: int | None = None):
        if batch_index is not None:
            message = f"batch {batch_index}: {message}"
        super().__init__(message, stage=stage)
        self.batch_index = batch_index


class FormattingWarning(UserWarning):
    """Reported when the optional formatter step fails. Never fatal."""
