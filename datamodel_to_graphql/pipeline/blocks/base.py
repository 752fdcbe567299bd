"""
Base class for block generators.

A block is one category of generated artifacts. Every block writes one
module per generated type into its own subdirectory, then one barrel
(`__init__.py`) per directory that re-exports every generated name.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ..config import EmitBlockKind, GeneratorOptions
from ..emission.atomic_writer import AtomicWriter
from ..imports import ImportResolver, ModuleParts, module_file, output_args_module, package_init
from ..normalizer import Document, DocumentField
from ..rendering import TemplateRenderer, build_declaration


@dataclass
class GenerationMetrics:
    """What one block generator produced."""

    items_generated: int = 0
    time_elapsed: float | None = None  # milliseconds
    written_paths: list[Path] = field(default_factory=list)


@dataclass(frozen=True)
class BlockContext:
    """Read-only collaborators shared by every block of a run."""

    document: Document
    options: GeneratorOptions
    renderer: TemplateRenderer
    imports: ImportResolver


@dataclass(frozen=True)
class BarrelEntry:
    """`from .<module> import <name>` line of a barrel."""

    module: str
    name: str


class BlockGenerator(ABC):
    """Abstract base class for block generators."""

    kind: EmitBlockKind

    def __init__(self, context: BlockContext):
        """
        Initialize the block generator.

        Args:
            context: Document, options, renderer and import resolver of the run
        """
        self.document = context.document
        self.options = context.options
        self.renderer = context.renderer
        self.imports = context.imports
        self.output_dir = context.options.output_dir
        self.writer = AtomicWriter(stage=f"{self.get_block_name()}-generation")
        self._written: list[Path] = []

    def should_generate(self) -> bool:
        return self.options.should_generate_block(self.kind)

    def get_block_name(self) -> str:
        return self.kind.value

    def generate(self) -> GenerationMetrics:
        """
        Generate every module of the block.

        Returns:
            GenerationMetrics; empty when the block is disabled

        Raises:
            OutputWriteError: If a file cannot be written
        """
        if not self.should_generate():
            return GenerationMetrics()

        start = time.perf_counter()
        self._written = []
        items = self.generate_items()
        return GenerationMetrics(
            items_generated=items,
            time_elapsed=(time.perf_counter() - start) * 1000,
            written_paths=sorted(self._written),
        )

    @abstractmethod
    def generate_items(self) -> int:
        """Write the modules of the block and return the number of generated types."""

    def write_module(self, parts: ModuleParts, content: str) -> Path:
        path = self.output_dir / module_file(parts)
        self.writer.write(path, content, validate=self.options.validate_before_write)
        self._written.append(path)
        return path

    def write_barrel(
        self,
        directory: ModuleParts,
        entries: Iterable[BarrelEntry],
        collection_name: str | None = None,
        collection_items: Sequence[str] = (),
    ) -> Path:
        """
        Write the barrel of a directory.

        Args:
            directory: Package directory parts
            entries: Names re-exported by the barrel
            collection_name: Optional tuple of classes also exported
            collection_items: Class names of the tuple

        Returns:
            Path of the written barrel
        """
        entries = sorted(set(entries), key=lambda e: (e.name, e.module))
        exported = [e.name for e in entries]
        if collection_name:
            exported.append(collection_name)
        content = self.renderer.render(
            "barrel.py.jinja2",
            entries=entries,
            exported=exported,
            collection_name=collection_name,
            collection_items=sorted(collection_items),
        )
        path = self.output_dir / package_init(directory)
        self.writer.write(path, content, validate=self.options.validate_before_write)
        self._written.append(path)
        return path

    def render_type_class(
        self,
        decorator_kind: str,
        module: ModuleParts,
        name: str,
        fields: Sequence[DocumentField],
        description: str | None = None,
        *,
        is_input: bool = False,
        is_model: bool = False,
        args_module: Callable[[str], ModuleParts] = output_args_module,
    ) -> str:
        """
        Render a strawberry type, input or args class.

        Args:
            decorator_kind: "type" or "input"
            module: Module parts of the generated module
            name: Class name
            fields: Emitted fields, in declaration order
            description: Class documentation
            is_input: Input or args class
            is_model: Model class (relation fields are private storage)
            args_module: Location of the args types of accessor fields

        Returns:
            Module source
        """
        import_set = self.imports.resolve(
            module,
            name,
            fields,
            args_module=args_module,
            relation_fields_are_private=is_model,
            lazy_references=True,
        )
        declarations = [
            build_declaration(f, self.options, is_input=is_input, is_model=is_model, owner_module=module) for f in fields
        ]
        return self.renderer.render(
            "type_class.py.jinja2",
            kind=decorator_kind,
            name=name,
            description=description,
            imports=import_set.render(),
            declarations=declarations,
        )
