"""
Models block: one strawberry object type per model.

Relation fields are private storage; they are exposed by the relation
resolvers instead.
"""

from __future__ import annotations

from ..config import EmitBlockKind
from ..imports import MODELS_DIR
from .base import BarrelEntry, BlockGenerator


class ModelsBlockGenerator(BlockGenerator):
    kind = EmitBlockKind.MODELS

    def generate_items(self) -> int:
        entries = []
        for model in self.document.models.values():
            module = (*MODELS_DIR, model.name)
            content = self.render_type_class(
                "type",
                module,
                model.name,
                model.emitted_fields,
                model.documentation,
                is_model=True,
            )
            self.write_module(module, content)
            entries.append(BarrelEntry(model.name, model.name))

        self.write_barrel(MODELS_DIR, entries)
        return len(entries)
