"""
Outputs block: object types of operation results and their args types.

Query, Mutation and the model output types are not emitted here; models
have their own block and root operations are served by the resolvers.
"""

from __future__ import annotations

from ..config import EmitBlockKind
from ..imports import OUTPUT_ARGS_DIR, OUTPUTS_DIR
from .base import BarrelEntry, BlockGenerator


class OutputsBlockGenerator(BlockGenerator):
    kind = EmitBlockKind.OUTPUTS

    def generate_items(self) -> int:
        entries = []
        for output_type in self.document.output_types_to_generate:
            module = (*OUTPUTS_DIR, output_type.name)
            content = self.render_type_class(
                "type",
                module,
                output_type.name,
                output_type.emitted_fields,
                output_type.documentation,
            )
            self.write_module(module, content)
            entries.append(BarrelEntry(output_type.name, output_type.name))

        args_entries = []
        for args_type in self.document.output_args_types():
            module = (*OUTPUT_ARGS_DIR, args_type.name)
            content = self.render_type_class("input", module, args_type.name, args_type.emitted_fields, is_input=True)
            self.write_module(module, content)
            args_entries.append(BarrelEntry(args_type.name, args_type.name))

        if args_entries:
            self.write_barrel(OUTPUT_ARGS_DIR, args_entries)
        self.write_barrel(OUTPUTS_DIR, entries + [BarrelEntry("args", e.name) for e in args_entries])
        return len(entries) + len(args_entries)
