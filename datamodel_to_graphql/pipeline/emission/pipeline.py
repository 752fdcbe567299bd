"""
Emission pipeline.

Persists the staged files of a run and, in compiled mode, produces the
byte-compiled form and a declaration stub of every module using a pool of
stateless workers:

    1. save: staged files are written atomically
    2. format (optional, best effort): a failure becomes a warning
    3. compiled mode only, concurrently on one pool:
       - N transpile batches over the sorted source list
       - one declaration job over the whole source list

Formatting runs before compilation so that the checked-hash byte code
matches the final sources.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from ..config import ExecutorKind, FormatMode, GeneratorOptions
from ..errors import EmissionError
from ..formatters import get_formatter
from ..metrics import MetricsListener
from .atomic_writer import AtomicWriter
from .workers import (
    BatchResult,
    DeclarationJob,
    TranspileBatch,
    TranspileOptions,
    partition,
    synthesize_declarations,
    transpile_batch,
)

logger = logging.getLogger(__name__)

TYPED_MARKER = "py.typed"


@dataclass(frozen=True)
class StagedFile:
    """A file to persist, relative to the output directory."""

    path: Path
    content: str | bytes


@dataclass
class EmissionResult:
    written_paths: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    transpiled_files: int = 0
    declaration_files: int = 0


def _executor(kind: ExecutorKind, max_workers: int) -> ThreadPoolExecutor | ProcessPoolExecutor:
    """Return an executor for the requested backend."""
    if kind is ExecutorKind.PROCESS:
        return ProcessPoolExecutor(max_workers=max_workers)
    return ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="emit")


def _noop(_msg: str) -> None:
    pass


class EmissionPipeline:
    """Persists a run's output and produces its compiled artifacts."""

    def __init__(
        self,
        options: GeneratorOptions,
        metrics: MetricsListener | None = None,
        log: Callable[[str], None] = _noop,
    ):
        """
        Initialize the pipeline.

        Args:
            options: Resolved generator options
            metrics: Optional metrics sink
            log: Progress callback
        """
        self.options = options
        self.metrics = metrics
        self.log = log
        self.root = options.output_dir

    def _metric(self, name: str, start: float, item_count: int | None = None) -> None:
        if self.metrics is not None:
            self.metrics.emit_metric(name, (time.perf_counter() - start) * 1000, item_count)

    def emit(self, staged: Sequence[StagedFile], generated_paths: Sequence[Path]) -> EmissionResult:
        """
        Run the emission stages.

        Args:
            staged: In-memory files to persist
            generated_paths: Files already written by the block generators

        Returns:
            EmissionResult with every written source and the formatter warnings

        Raises:
            OutputWriteError: If a staged file cannot be written
            EmissionError: If a transpile batch or the declaration job fails
        """
        start = time.perf_counter()
        result = EmissionResult()

        self.log("Saving generated code")
        save_start = time.perf_counter()
        saved = self.save(staged)
        self._metric("save-files", save_start, len(saved))

        result.written_paths = sorted({*generated_paths, *saved})
        sources = [path for path in result.written_paths if path.suffix == ".py"]

        if self.options.format_mode is not FormatMode.NONE:
            result.warnings.extend(self.format(sources))

        if self.options.emit_transpiled_code:
            self.log("Transpiling generated code")
            marker = self.root / TYPED_MARKER
            AtomicWriter(stage="save-files").write(marker, "", validate=False)
            result.written_paths.append(marker)
            result.written_paths.sort()
            result.transpiled_files, result.declaration_files = self.compile(sources)

        self._metric("code-emission", start)
        return result

    def save(self, staged: Sequence[StagedFile]) -> list[Path]:
        writer = AtomicWriter(stage="save-files")
        written = []
        for staged_file in staged:
            path = self.root / staged_file.path
            writer.write(path, staged_file.content, validate=self.options.validate_before_write)
            written.append(path)
        return written

    def format(self, sources: Sequence[Path]) -> list[str]:
        """Run the configured formatter; failures are returned as warnings."""
        mode = self.options.format_mode
        formatter = get_formatter(mode)
        self.log(f"Formatting generated code with {mode.value}")

        start = time.perf_counter()
        outcome = formatter.format_tree(self.root, sources, self.options.formatter)
        if not outcome.ok:
            message = f"Code formatting failed ({mode.value}): {outcome.message}"
            logger.warning(message)
            self.log(f"Warning: {message}")
            return [message]

        self._metric(f"{mode.value}-formatting", start, len(sources))
        self._metric("code-formatting", start)
        return []

    def compile(self, sources: Sequence[Path]) -> tuple[int, int]:
        """
        Byte-compile and stub every source on the worker pool.

        Returns:
            (number of compiled files, number of stubs)

        Raises:
            EmissionError: On the first failed batch (in batch order) or a
                failed declaration job; pending work is cancelled
        """
        paths = sorted(str(path) for path in sources)
        batches = partition(paths, self.options.worker_count)
        if not batches:
            return 0, 0

        transpile_options = TranspileOptions(optimization=self.options.optimization)
        job = DeclarationJob(
            root=str(self.root),
            paths=tuple(paths),
            skip_verification=self.options.skip_declaration_verification,
        )
        logger.debug("Compiling %d files in %d batches", len(paths), len(batches))

        start = time.perf_counter()
        # One extra worker so the declaration job never waits behind a batch
        with _executor(self.options.executor, len(batches) + 1) as pool:
            declarations = pool.submit(synthesize_declarations, job)
            transpiles = [
                pool.submit(transpile_batch, TranspileBatch(index, batch, transpile_options))
                for index, batch in enumerate(batches)
            ]
            try:
                compiled = 0
                for index, future in enumerate(transpiles):
                    batch_result = self._result(future, "transpile", index)
                    if not batch_result.ok:
                        raise EmissionError(batch_result.error or "transpile failed", stage="transpile", batch_index=index)
                    compiled += batch_result.files
                self._metric("transpile", start, compiled)

                declaration_result = self._result(declarations, "declarations")
                if not declaration_result.ok:
                    raise EmissionError(declaration_result.error or "declaration synthesis failed", stage="declarations")
                self._metric("generate-declarations", start, declaration_result.files)
            except EmissionError:
                pool.shutdown(wait=True, cancel_futures=True)
                raise

        return compiled, declaration_result.files

    @staticmethod
    def _result(future: Future, stage: str, batch_index: int | None = None) -> BatchResult:
        """Wait for a worker and attach stage context to a crashed worker."""
        try:
            return future.result()
        except Exception as e:
            raise EmissionError(f"worker crashed: {e}", stage=stage, batch_index=batch_index) from e
