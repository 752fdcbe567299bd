"""
Block generation module.

Block generators, the two-phase orchestrator and the auxiliary files.
"""

from __future__ import annotations

from .auxiliary import AuxiliaryFilesBuilder
from .base import BarrelEntry, BlockContext, BlockGenerator, GenerationMetrics
from .crud_resolvers import CrudResolversBlockGenerator
from .enums import EnumsBlockGenerator
from .inputs import InputsBlockGenerator
from .models import ModelsBlockGenerator
from .orchestrator import BLOCK_GENERATORS, PHASE_ONE, PHASE_TWO, BlockOrchestrator
from .outputs import OutputsBlockGenerator
from .relation_resolvers import RelationResolversBlockGenerator

__all__ = [
    "AuxiliaryFilesBuilder",
    "BLOCK_GENERATORS",
    "BarrelEntry",
    "BlockContext",
    "BlockGenerator",
    "BlockOrchestrator",
    "CrudResolversBlockGenerator",
    "EnumsBlockGenerator",
    "GenerationMetrics",
    "InputsBlockGenerator",
    "ModelsBlockGenerator",
    "OutputsBlockGenerator",
    "PHASE_ONE",
    "PHASE_TWO",
    "RelationResolversBlockGenerator",
]
