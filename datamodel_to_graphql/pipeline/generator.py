"""
Code generator entry point.

Runs one generation from schema IR to the on-disk package:

    configuration -> normalizer -> block orchestrator -> auxiliary files
    -> emission pipeline

Any fatal error aborts the run with the stage it happened in. The output
directory is cleared when the run starts, so an aborted run leaves
partial output that the next run replaces.
"""

from __future__ import annotations

import dataclasses
import logging
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .blocks import AuxiliaryFilesBuilder, BlockContext, BlockOrchestrator, GenerationMetrics
from .config import GeneratorConfig, GeneratorOptions
from .emission import EmissionPipeline
from .errors import OutputWriteError
from .imports import ImportResolver
from .metrics import MetricsListener
from .normalizer import normalize
from .rendering import TemplateRenderer
from .schema_ir import SchemaIR

logger = logging.getLogger(__name__)

LogCallback = Callable[[str], None]


@dataclass
class GenerationReport:
    """Outcome of a successful run."""

    output_dir: Path
    written_paths: list[Path] = field(default_factory=list)
    block_metrics: dict[str, GenerationMetrics] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    transpiled_files: int = 0
    declaration_files: int = 0


def prepare_output_dir(output_dir: Path) -> None:
    """
    Clear the output directory and recreate it.

    Raises:
        OutputWriteError: If the directory cannot be removed or created
    """
    if output_dir.exists() and not output_dir.is_dir():
        raise OutputWriteError("Output path exists and is not a directory", output_dir, stage="prepare-output")
    try:
        if output_dir.is_dir():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(f"Cannot prepare output directory ({e.strerror})", output_dir, stage="prepare-output") from e


class CodeGenerator:
    """Generates a GraphQL API package from schema IR."""

    def __init__(self, metrics: MetricsListener | None = None):
        """
        Initialize the generator.

        Args:
            metrics: Optional metrics sink receiving one measurement per stage
        """
        self.metrics = metrics

    def _metric(self, name: str, start: float, item_count: int | None = None) -> None:
        if self.metrics is not None:
            self.metrics.emit_metric(name, (time.perf_counter() - start) * 1000, item_count)

    def generate(
        self,
        raw_schema: SchemaIR | dict[str, Any],
        config: GeneratorConfig | GeneratorOptions,
        log: LogCallback | None = None,
    ) -> GenerationReport:
        """
        Run a complete generation.

        Args:
            raw_schema: SchemaIR or its dictionary form
            config: Generator configuration, resolved here when not already resolved
            log: Progress callback, only called when verbose logging is on

        Returns:
            GenerationReport

        Raises:
            ConfigError: If the configuration is invalid (before any output is touched)
            SchemaResolutionError: If a type reference does not resolve
            OutputWriteError: If the output tree cannot be written
            EmissionError: If compilation or stub synthesis fails
        """
        start = time.perf_counter()
        options = config.resolve() if isinstance(config, GeneratorConfig) else config

        def emit(message: str) -> None:
            logger.debug(message)
            if options.verbose_logging and log is not None:
                log(message)

        schema = raw_schema if isinstance(raw_schema, SchemaIR) else SchemaIR.from_dict(raw_schema)

        emit("Transforming schema document...")
        document_start = time.perf_counter()
        document = normalize(schema, options)
        self._metric("document-creation", document_start)

        prepare_output_dir(options.output_dir)

        imports = ImportResolver()
        renderer = TemplateRenderer(options)
        context = BlockContext(document=document, options=options, renderer=renderer, imports=imports)

        def on_block_complete(block_name: str, metrics: GenerationMetrics) -> None:
            if self.metrics is not None and metrics.time_elapsed is not None:
                self.metrics.emit_metric(f"{block_name}-generation", metrics.time_elapsed, metrics.items_generated)

        block_metrics = BlockOrchestrator(context, log=emit, on_block_complete=on_block_complete).generate_all_blocks()

        emit("Generate auxiliary files")
        auxiliary_start = time.perf_counter()
        raw = schema.raw or dataclasses.asdict(schema)
        staged = AuxiliaryFilesBuilder(document, options, renderer, imports).build(raw)
        self._metric("auxiliary-files", auxiliary_start, len(staged))

        emit("Emitting final code")
        generated_paths = [path for metrics in block_metrics.values() for path in metrics.written_paths]
        emission = EmissionPipeline(options, metrics=self.metrics, log=emit).emit(staged, generated_paths)

        self._metric("total-generation", start)
        if self.metrics is not None:
            self.metrics.on_complete()

        return GenerationReport(
            output_dir=options.output_dir,
            written_paths=emission.written_paths,
            block_metrics=block_metrics,
            warnings=emission.warnings,
            transpiled_files=emission.transpiled_files,
            declaration_files=emission.declaration_files,
        )


def generate_code(
    raw_schema: SchemaIR | dict[str, Any],
    config: GeneratorConfig | GeneratorOptions,
    log: LogCallback | None = None,
    metrics: MetricsListener | None = None,
) -> GenerationReport:
    """Run a complete generation; see CodeGenerator.generate."""
    return CodeGenerator(metrics).generate(raw_schema, config, log)
