"""
Import resolver for generated modules.

Computes the minimal, deduplicated and deterministically ordered import
set of one generated module from the fields it declares.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..normalizer import DocumentField, TypeLocation
from .locations import (
    SCALARS_MODULE,
    ModuleParts,
    output_args_module,
    relative_module,
    type_module,
)

# Scalars that need a binding from the generated scalars module
CUSTOM_SCALARS = {
    "Decimal": "DecimalScalar",
    "BigInt": "BigIntScalar",
    "Bytes": "BytesScalar",
}

STDLIB_MODULES = {"datetime", "enum", "typing"}


@dataclass(frozen=True)
class ImportEntry:
    """One import statement: `import module` or `from module import name`."""

    module: str
    name: str | None = None

    @property
    def sort_key(self) -> tuple[str, str]:
        return (self.name or self.module, self.module)

    def render(self) -> str:
        if self.name is None:
            return f"import {self.module}"
        return f"from {self.module} import {self.name}"


def _ordered(entries: Iterable[ImportEntry]) -> tuple[ImportEntry, ...]:
    return tuple(sorted(set(entries), key=lambda e: e.sort_key))


@dataclass(frozen=True)
class ImportSet:
    """Imports of one generated module, partitioned by category."""

    framework: tuple[ImportEntry, ...] = ()
    custom_scalars: tuple[ImportEntry, ...] = ()
    generated: tuple[ImportEntry, ...] = ()
    enums: tuple[ImportEntry, ...] = ()
    # Types referenced through strawberry.lazy, only imported for type checking
    type_checking: tuple[ImportEntry, ...] = ()

    def all_entries(self) -> tuple[ImportEntry, ...]:
        return self.framework + self.custom_scalars + self.generated + self.enums + self.type_checking

    def imported_names(self) -> list[str]:
        """Names bound by the local (generated) imports, in category order."""
        local = self.custom_scalars + self.generated + self.enums + self.type_checking
        return [e.name for e in local if e.name is not None]

    def render(self) -> str:
        """Render the import block: __future__, stdlib, third-party, local, TYPE_CHECKING."""
        sections = [["from __future__ import annotations"]]

        stdlib = [e.render() for e in self.framework if e.module.split(".")[0] in STDLIB_MODULES]
        third_party = [e.render() for e in self.framework if e.module.split(".")[0] not in STDLIB_MODULES]
        local = [e.render() for e in self.custom_scalars + self.generated + self.enums]
        for section in (stdlib, third_party, local):
            if section:
                sections.append(section)
        if self.type_checking:
            sections.append(["if typing.TYPE_CHECKING:"] + [f"    {e.render()}" for e in self.type_checking])

        return "\n\n".join("\n".join(section) for section in sections)


class ImportResolver:
    """
    Computes import sets of generated modules.

    The resolver is a pure function of its inputs and holds no state, so
    concurrent block generators can share one instance.
    """

    def resolve(
        self,
        owner_module: ModuleParts,
        owner_name: str,
        fields: Iterable[DocumentField],
        *,
        args_module: Callable[[str], ModuleParts] = output_args_module,
        relation_fields_are_private: bool = False,
        lazy_references: bool = False,
        framework: Iterable[ImportEntry] = (),
        extra: Iterable[ImportEntry] = (),
    ) -> ImportSet:
        """
        Compute the import set of a module.

        Args:
            owner_module: Module parts of the module being generated
            owner_name: Name of the type the module declares
            fields: Emitted fields of the type
            args_module: Location of the args types referenced by the fields
            relation_fields_are_private: Model relation fields are private
                storage and never take an args accessor
            lazy_references: References to object types are strawberry.lazy
                annotations, so their imports are only needed for type checking
            framework: Additional framework imports
            extra: Additional local imports (resolver dependencies)

        Returns:
            The ImportSet, with every category deduplicated and sorted
        """
        framework_entries = {ImportEntry("typing"), ImportEntry("strawberry"), *framework}
        custom_scalars = set()
        generated = set(extra)
        enums = set()
        type_checking = set()

        def local(target_module: ModuleParts, name: str) -> ImportEntry:
            return ImportEntry(relative_module(owner_module, target_module), name)

        for field in fields:
            target = field.target
            if target.location is TypeLocation.SCALAR:
                if target.type_name == "DateTime":
                    framework_entries.add(ImportEntry("datetime"))
                elif target.type_name == "Json":
                    framework_entries.add(ImportEntry("strawberry.scalars", "JSON"))
                elif target.type_name in CUSTOM_SCALARS:
                    custom_scalars.add(local(SCALARS_MODULE, CUSTOM_SCALARS[target.type_name]))
            elif target.type_name != owner_name:
                entry = local(type_module(target.location, target.type_name), target.type_name)
                if target.location is TypeLocation.ENUM_TYPES:
                    enums.add(entry)
                elif lazy_references:
                    type_checking.add(entry)
                else:
                    generated.add(entry)

            if field.args_type_name and not (relation_fields_are_private and target.location is TypeLocation.MODEL_TYPES):
                generated.add(local(args_module(field.args_type_name), field.args_type_name))

        return ImportSet(
            framework=_ordered(framework_entries),
            custom_scalars=_ordered(custom_scalars),
            generated=_ordered(generated),
            enums=_ordered(enums),
            type_checking=_ordered(type_checking),
        )
