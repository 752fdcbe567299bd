"""
Inputs block: one strawberry input per input object type.
"""

from __future__ import annotations

from ..config import EmitBlockKind
from ..imports import INPUTS_DIR
from .base import BarrelEntry, BlockGenerator


class InputsBlockGenerator(BlockGenerator):
    kind = EmitBlockKind.INPUTS

    def generate_items(self) -> int:
        entries = []
        for input_type in self.document.input_types.values():
            module = (*INPUTS_DIR, input_type.name)
            content = self.render_type_class(
                "input",
                module,
                input_type.name,
                input_type.emitted_fields,
                input_type.documentation,
                is_input=True,
            )
            self.write_module(module, content)
            entries.append(BarrelEntry(input_type.name, input_type.name))

        self.write_barrel(INPUTS_DIR, entries)
        return len(entries)
