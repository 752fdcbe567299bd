"""
Block orchestrator.

Enum and model names must exist before the blocks that import them are
generated, which gives a two-phase schedule:

    Phase 1 (sequential): enums, models
    Phase 2 (concurrent): inputs, outputs, crudResolvers, relationResolvers

Phase 2 blocks write disjoint subdirectories and only read the immutable
Document, so they share nothing but the renderer and import resolver.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from ..config import EmitBlockKind
from .base import BlockContext, BlockGenerator, GenerationMetrics
from .crud_resolvers import CrudResolversBlockGenerator
from .enums import EnumsBlockGenerator
from .inputs import InputsBlockGenerator
from .models import ModelsBlockGenerator
from .outputs import OutputsBlockGenerator
from .relation_resolvers import RelationResolversBlockGenerator

logger = logging.getLogger(__name__)

PHASE_ONE = (EmitBlockKind.ENUMS, EmitBlockKind.MODELS)
PHASE_TWO = (
    EmitBlockKind.INPUTS,
    EmitBlockKind.OUTPUTS,
    EmitBlockKind.CRUD_RESOLVERS,
    EmitBlockKind.RELATION_RESOLVERS,
)

BLOCK_GENERATORS: dict[EmitBlockKind, type[BlockGenerator]] = {
    EmitBlockKind.ENUMS: EnumsBlockGenerator,
    EmitBlockKind.MODELS: ModelsBlockGenerator,
    EmitBlockKind.INPUTS: InputsBlockGenerator,
    EmitBlockKind.OUTPUTS: OutputsBlockGenerator,
    EmitBlockKind.CRUD_RESOLVERS: CrudResolversBlockGenerator,
    EmitBlockKind.RELATION_RESOLVERS: RelationResolversBlockGenerator,
}

BlockCallback = Callable[[str, GenerationMetrics], None]


def _noop(_msg: str) -> None:
    pass


class BlockOrchestrator:
    """Runs the block generators of a run in dependency order."""

    def __init__(
        self,
        context: BlockContext,
        log: Callable[[str], None] = _noop,
        on_block_complete: BlockCallback | None = None,
        generators: dict[EmitBlockKind, type[BlockGenerator]] | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            context: Shared block context
            log: Progress callback
            on_block_complete: Called with (block name, metrics) for every
                enabled block, in block order
            generators: Generator class per block kind
        """
        self.context = context
        self.log = log
        self.on_block_complete = on_block_complete
        self.generators = generators or BLOCK_GENERATORS

    def generate_all_blocks(self) -> dict[str, GenerationMetrics]:
        """
        Generate every enabled block.

        Returns:
            Metrics per block name, in block order

        Raises:
            GenerationError: The first failure in block order. Files already
                written by other blocks stay on disk.
        """
        results: dict[str, GenerationMetrics] = {}

        for kind in PHASE_ONE:
            generator = self.generators[kind](self.context)
            if generator.should_generate():
                self._complete(generator, self._run(generator), results)

        phase_two = [self.generators[kind](self.context) for kind in PHASE_TWO]
        phase_two = [generator for generator in phase_two if generator.should_generate()]
        if not phase_two:
            return results

        with ThreadPoolExecutor(max_workers=len(phase_two), thread_name_prefix="block") as pool:
            futures = [(generator, pool.submit(self._run, generator)) for generator in phase_two]

        # The pool has joined: every block finished or failed
        for generator, future in futures:
            error = future.exception()
            if error is not None:
                logger.error("Block %s failed: %s", generator.get_block_name(), error)
                raise error

        for generator, future in futures:
            self._complete(generator, future.result(), results)
        return results

    def _run(self, generator: BlockGenerator) -> GenerationMetrics:
        self.log(f"Generating {generator.get_block_name()}...")
        return generator.generate()

    def _complete(
        self,
        generator: BlockGenerator,
        metrics: GenerationMetrics,
        results: dict[str, GenerationMetrics],
    ) -> None:
        name = generator.get_block_name()
        results[name] = metrics
        logger.debug("Block %s generated %d items", name, metrics.items_generated)
        if self.on_block_complete is not None:
            self.on_block_complete(name, metrics)
