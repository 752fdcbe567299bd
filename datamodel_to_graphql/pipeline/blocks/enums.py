"""
Enums block: one strawberry enum per schema enum.
"""

from __future__ import annotations

from ..config import EmitBlockKind
from ..imports import ENUMS_DIR, ImportEntry
from .base import BarrelEntry, BlockGenerator


class EnumsBlockGenerator(BlockGenerator):
    kind = EmitBlockKind.ENUMS

    def generate_items(self) -> int:
        entries = []
        for enum_type in self.document.enums.values():
            module = (*ENUMS_DIR, enum_type.name)
            import_set = self.imports.resolve(module, enum_type.name, (), framework=(ImportEntry("enum"),))
            content = self.renderer.render(
                "enum.py.jinja2",
                name=enum_type.name,
                description=enum_type.documentation,
                values=enum_type.values,
                imports=import_set.render(),
            )
            self.write_module(module, content)
            entries.append(BarrelEntry(enum_type.name, enum_type.name))

        self.write_barrel(ENUMS_DIR, entries)
        return len(entries)
