"""Datamodel to GraphQL Generator

A Python package generating a typed Strawberry GraphQL API layer (object
types, inputs, enums, args types and resolvers) from the schema IR of a
relational data model, with an optional parallel byte-compilation and
stub emission stage.
"""

__version__ = "1.0.0"

from .pipeline import (
    CodeGenerator,
    ConfigError,
    EmissionError,
    FormatMode,
    FormattingWarning,
    GenerationError,
    GenerationReport,
    GeneratorConfig,
    OutputWriteError,
    SchemaIR,
    SchemaResolutionError,
    SimpleMetricsCollector,
    generate_code,
)

__all__ = [
    "CodeGenerator",
    "ConfigError",
    "EmissionError",
    "FormatMode",
    "FormattingWarning",
    "GenerationError",
    "GenerationReport",
    "GeneratorConfig",
    "OutputWriteError",
    "SchemaIR",
    "SchemaResolutionError",
    "SimpleMetricsCollector",
    "generate_code",
]
