"""
Emission workers.

Functions in this module run inside the emission worker pool. They are
top-level and take and return small frozen records so that they can be
shipped to worker processes: a worker receives a batch by value and
returns only success or failure.
"""

from __future__ import annotations

import py_compile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..errors import GenerationError


@dataclass(frozen=True)
class TranspileOptions:
    """Byte compiler options shared by every batch."""

    optimization: int = -1


@dataclass(frozen=True)
class TranspileBatch:
    index: int
    paths: tuple[str, ...]
    options: TranspileOptions


@dataclass(frozen=True)
class DeclarationJob:
    """Stub synthesis over the whole file set."""

    root: str
    paths: tuple[str, ...]
    skip_verification: bool = True


@dataclass(frozen=True)
class BatchResult:
    index: int
    ok: bool
    error: str | None = None
    files: int = 0


def partition(paths: Sequence[str], worker_count: int) -> list[tuple[str, ...]]:
    """
    Split paths into contiguous batches of near-equal size.

    Args:
        paths: Sorted file paths
        worker_count: Maximum number of batches

    Returns:
        min(len(paths), worker_count) non-empty batches, in path order
    """
    count = min(len(paths), worker_count)
    if count == 0:
        return []
    size, remainder = divmod(len(paths), count)
    batches = []
    start = 0
    for i in range(count):
        end = start + size + (1 if i < remainder else 0)
        batches.append(tuple(paths[start:end]))
        start = end
    return batches


def transpile_batch(batch: TranspileBatch) -> BatchResult:
    """Byte-compile every file of a batch into its __pycache__ directory.

    Checked-hash invalidation keeps the compiled bytes independent of file
    timestamps, so identical sources always produce identical artifacts.
    """
    for path in batch.paths:
        try:
            py_compile.compile(
                path,
                doraise=True,
                optimize=batch.options.optimization,
                invalidation_mode=py_compile.PycInvalidationMode.CHECKED_HASH,
            )
        except (py_compile.PyCompileError, OSError) as e:
            return BatchResult(batch.index, ok=False, error=f"{Path(path).name}: {e}")
    return BatchResult(batch.index, ok=True, files=len(batch.paths))


def synthesize_declarations(job: DeclarationJob) -> BatchResult:
    """Write a .pyi stub next to every source of the job."""
    from .stubs import unresolved_relative_imports, write_stub

    root = Path(job.root)
    for path_str in job.paths:
        path = Path(path_str)
        try:
            if not job.skip_verification:
                missing = unresolved_relative_imports(path, root)
                if missing:
                    return BatchResult(0, ok=False, error=f"{path.name}: unresolved imports {', '.join(missing)}")
            write_stub(path)
        except (SyntaxError, OSError, GenerationError) as e:
            return BatchResult(0, ok=False, error=f"{path.name}: {e}")
    return BatchResult(0, ok=True, files=len(job.paths))
