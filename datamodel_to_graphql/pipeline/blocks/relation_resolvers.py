"""
Relation resolvers block.

Exposes the relation fields of every model with a key through a resolver
class that loads the relation from its parent record:

    resolvers/relations/<Model>/<Model>RelationsResolver.py
    resolvers/relations/<Model>/args/<Model><Field>Args.py
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace

from ...utils import escape_identifier
from ..config import EmitBlockKind
from ..imports import (
    HELPERS_MODULE,
    MODELS_DIR,
    RELATIONS_DIR,
    ImportEntry,
    relations_args_module,
    relations_resolver_module,
    relative_module,
)
from ..normalizer import DocumentField, FieldKind, Model
from ..rendering import python_type
from .base import BarrelEntry, BlockGenerator


@dataclass(frozen=True)
class RelationMethod:
    field_name: str
    python_name: str
    field_arguments: tuple[str, ...]
    args_type_name: str | None
    return_type: str
    include: str
    empty_value: str


def relations_resolver_name(model_name: str) -> str:
    return f"{model_name}RelationsResolver"


def resolved_relation_fields(model: Model) -> tuple[DocumentField, ...]:
    """Relation fields exposed by the relation resolver of a model.

    A model without identifying fields cannot be looked up by its parent
    record, so it gets no relation resolver.
    """
    if not model.identifying_fields:
        return ()
    return tuple(f for f in model.emitted_fields if f.kind is FieldKind.RELATION)


def where_expression(model: Model) -> str:
    """Unique lookup of the parent record, e.g. {"id": root.id}."""
    key_fields = model.identifying_fields
    if len(key_fields) == 1:
        key = key_fields[0]
        return f"{{{json.dumps(key)}: root.{escape_identifier(key)}}}"
    compound_name = model.primary_key_name if key_fields == model.primary_key and model.primary_key_name else "_".join(key_fields)
    values = ", ".join(f"{json.dumps(key)}: root.{escape_identifier(key)}" for key in key_fields)
    return f"{{{json.dumps(compound_name)}: {{{values}}}}}"


class RelationResolversBlockGenerator(BlockGenerator):
    kind = EmitBlockKind.RELATION_RESOLVERS

    def generate_items(self) -> int:
        resolver_entries = []
        resolver_names = []
        items = 0
        for model in self.document.models.values():
            fields = resolved_relation_fields(model)
            if not fields:
                continue
            args_names = self._generate_model_package(model, fields)
            resolver_name = relations_resolver_name(model.name)
            resolver_names.append(resolver_name)
            resolver_entries.append(BarrelEntry(model.name, resolver_name))
            resolver_entries.extend(BarrelEntry(model.name, name) for name in args_names)
            items += 1 + len(args_names)

        self.write_barrel(RELATIONS_DIR, resolver_entries, "relation_resolvers", resolver_names)
        return items

    def _generate_model_package(self, model: Model, fields: tuple[DocumentField, ...]) -> list[str]:
        args_names = []
        for args_type in self.document.relation_args.get(model.name, ()):
            module = relations_args_module(model.name, args_type.name)
            content = self.render_type_class(
                "input",
                module,
                args_type.name,
                args_type.emitted_fields,
                is_input=True,
                args_module=lambda name: relations_args_module(model.name, name),
            )
            self.write_module(module, content)
            args_names.append(args_type.name)

        resolver_name = relations_resolver_name(model.name)
        self.write_module(relations_resolver_module(model.name), self._render_resolver(model, fields))

        package = (*RELATIONS_DIR, model.name)
        if args_names:
            self.write_barrel((*package, "args"), [BarrelEntry(name, name) for name in args_names])
        self.write_barrel(
            package,
            [BarrelEntry(resolver_name, resolver_name)] + [BarrelEntry("args", name) for name in args_names],
        )
        return args_names

    def _render_resolver(self, model: Model, fields: tuple[DocumentField, ...]) -> str:
        module = relations_resolver_module(model.name)
        helpers = relative_module(module, HELPERS_MODULE)
        extra = [
            ImportEntry(relative_module(module, (*MODELS_DIR, model.name)), model.name),
            ImportEntry(helpers, "get_client"),
        ]
        if any(f.args_type_name for f in fields):
            extra.append(ImportEntry(helpers, "transform_args"))

        import_set = self.imports.resolve(
            module,
            relations_resolver_name(model.name),
            fields,
            args_module=lambda name: relations_args_module(model.name, name),
            extra=extra,
        )

        methods = []
        for field in fields:
            # A missing parent record yields null for single relations
            returned = field if field.is_list else replace(field, is_nullable=True)
            field_arguments = [f"name={json.dumps(field.exposed_name)}"]
            if field.documentation:
                field_arguments.append(f"description={json.dumps(field.documentation)}")
            methods.append(
                RelationMethod(
                    field_name=field.name,
                    python_name=escape_identifier(field.name),
                    field_arguments=tuple(field_arguments),
                    args_type_name=field.args_type_name,
                    return_type=python_type(returned, self.options),
                    include="transform_args(args) or True" if field.args_type_name else "True",
                    empty_value="[]" if field.is_list else "None",
                )
            )

        return self.renderer.render(
            "relations_resolver.py.jinja2",
            name=relations_resolver_name(model.name),
            model=model.name,
            imports=import_set.render(),
            methods=methods,
            where=where_expression(model),
            context_key=self.options.context_client_key,
            client_model=model.name.lower(),
        )
