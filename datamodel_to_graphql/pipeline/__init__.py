"""
Generation pipeline.

Transforms schema IR into a Strawberry GraphQL package:

1. Schema IR: dictionary -> raw nodes
2. Normalizer: raw nodes -> immutable Document
3. Blocks: Document -> one module per generated type, two-phase schedule
4. Emission: persist, format, byte-compile and stub the output tree
"""

from __future__ import annotations

from .blocks import BlockContext, BlockGenerator, BlockOrchestrator, GenerationMetrics
from .config import (
    EmissionConfig,
    EmitBlockKind,
    ExecutorKind,
    FormatMode,
    FormatterConfig,
    GeneratorConfig,
    GeneratorOptions,
    get_blocks_to_emit,
)
from .emission import EmissionPipeline
from .errors import (
    ConfigError,
    EmissionError,
    FormattingWarning,
    GenerationError,
    OutputWriteError,
    SchemaResolutionError,
)
from .generator import CodeGenerator, GenerationReport, generate_code
from .imports import ImportResolver, ImportSet
from .metrics import MetricsListener, SimpleMetricsCollector
from .normalizer import Document, normalize
from .schema_ir import SchemaIR

__all__ = [
    "BlockContext",
    "BlockGenerator",
    "BlockOrchestrator",
    "CodeGenerator",
    "ConfigError",
    "Document",
    "EmissionConfig",
    "EmissionError",
    "EmissionPipeline",
    "EmitBlockKind",
    "ExecutorKind",
    "FormatMode",
    "FormatterConfig",
    "FormattingWarning",
    "GenerationError",
    "GenerationMetrics",
    "GenerationReport",
    "GeneratorConfig",
    "GeneratorOptions",
    "ImportResolver",
    "ImportSet",
    "MetricsListener",
    "OutputWriteError",
    "SchemaIR",
    "SchemaResolutionError",
    "SimpleMetricsCollector",
    "generate_code",
    "get_blocks_to_emit",
    "normalize",
]
