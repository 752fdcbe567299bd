"""
Emission module.

Atomic writes, the emission pipeline and its pool workers.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter
from .pipeline import TYPED_MARKER, EmissionPipeline, EmissionResult, StagedFile
from .stubs import synthesize_stub, unresolved_relative_imports
from .workers import (
    BatchResult,
    DeclarationJob,
    TranspileBatch,
    TranspileOptions,
    partition,
    synthesize_declarations,
    transpile_batch,
)

__all__ = [
    "AtomicWriter",
    "BatchResult",
    "DeclarationJob",
    "EmissionPipeline",
    "EmissionResult",
    "StagedFile",
    "TYPED_MARKER",
    "TranspileBatch",
    "TranspileOptions",
    "partition",
    "synthesize_declarations",
    "synthesize_stub",
    "transpile_batch",
    "unresolved_relative_imports",
]
