"""
Auxiliary files of the generated package.

These files depend on what every block produced, so they are staged in
memory after block generation and persisted by the emission pipeline:
the root and resolvers barrels, the enhance map, the custom scalars, the
client helpers and optionally a copy of the schema IR.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..config import EmitBlockKind, GeneratorOptions
from ..emission import StagedFile
from ..imports import CRUD_DIR, ENHANCE_MODULE, RELATIONS_DIR, ImportEntry, ImportResolver, relative_module
from ..normalizer import Document
from ..rendering import TemplateRenderer
from .crud_resolvers import crud_resolver_name
from .relation_resolvers import relations_resolver_name, resolved_relation_fields

SCHEMA_IR_FILE = "schema_ir.json"


def _field_names(fields) -> tuple[str, ...]:
    return tuple(f.exposed_name for f in fields)


class AuxiliaryFilesBuilder:
    """Stages the auxiliary files of one run."""

    def __init__(self, document: Document, options: GeneratorOptions, renderer: TemplateRenderer, imports: ImportResolver):
        self.document = document
        self.options = options
        self.renderer = renderer
        self.imports = imports

    def build(self, raw_schema: dict[str, Any] | None = None) -> list[StagedFile]:
        """
        Stage every auxiliary file.

        Args:
            raw_schema: Schema IR dictionary copied into the package when
                emit_schema_ir is set

        Returns:
            Staged files, sorted by path
        """
        staged = [
            StagedFile(Path("__init__.py"), self.root_index()),
            StagedFile(Path("enhance.py"), self.enhance()),
            StagedFile(Path("scalars.py"), self.renderer.render("scalars.py.jinja2")),
            StagedFile(
                Path("helpers.py"),
                self.renderer.render(
                    "helpers.py.jinja2",
                    client_import_path=self.options.client_import_path,
                    context_key=self.options.context_client_key,
                ),
            ),
        ]
        resolver_packages = self.resolver_packages()
        if resolver_packages:
            staged.append(
                StagedFile(
                    Path("resolvers", "__init__.py"),
                    self.renderer.render("resolvers_index.py.jinja2", packages=resolver_packages),
                )
            )
        if self.options.emit_schema_ir and raw_schema is not None:
            staged.append(StagedFile(Path(SCHEMA_IR_FILE), json.dumps(raw_schema, indent=2, sort_keys=True) + "\n"))
        return sorted(staged, key=lambda f: f.path)

    def resolver_packages(self) -> list[str]:
        packages = [
            (EmitBlockKind.INPUTS, "inputs"),
            (EmitBlockKind.OUTPUTS, "outputs"),
            (EmitBlockKind.CRUD_RESOLVERS, "crud"),
            (EmitBlockKind.RELATION_RESOLVERS, "relations"),
        ]
        return [name for kind, name in packages if self.options.should_generate_block(kind)]

    def root_index(self) -> str:
        packages = []
        if self.options.should_generate_block(EmitBlockKind.ENUMS):
            packages.append("enums")
        if self.options.should_generate_block(EmitBlockKind.MODELS):
            packages.append("models")
        if self.resolver_packages():
            packages.append("resolvers")
        return self.renderer.render(
            "root_index.py.jinja2",
            packages=packages,
            has_crud_resolvers=self.options.should_generate_block(EmitBlockKind.CRUD_RESOLVERS),
            has_relation_resolvers=self.options.should_generate_block(EmitBlockKind.RELATION_RESOLVERS),
        )

    def enhance(self) -> str:
        """The combined type and operation map of the generated package."""
        document = self.document
        should = self.options.should_generate_block

        crud_resolvers = []
        action_operations = []
        args_info = []
        if should(EmitBlockKind.CRUD_RESOLVERS):
            for mapping in document.model_mappings:
                if not mapping.actions:
                    continue
                crud_resolvers.append((mapping.model, crud_resolver_name(mapping.model)))
                action_operations.append((mapping.model, [(a.kind, a.method_name) for a in mapping.actions]))
                args_info.extend((a.args_type_name, _field_names(a.args)) for a in mapping.actions if a.args_type_name)

        relation_resolvers = []
        relation_info = []
        if should(EmitBlockKind.RELATION_RESOLVERS):
            for model in document.models.values():
                fields = resolved_relation_fields(model)
                if not fields:
                    continue
                relation_resolvers.append((model.name, relations_resolver_name(model.name)))
                relation_info.append((model.name, _field_names(fields)))
                args_info.extend((a.name, _field_names(a.fields)) for a in document.relation_args.get(model.name, ()))

        outputs_info = []
        if should(EmitBlockKind.OUTPUTS):
            outputs_info = [(t.name, _field_names(t.emitted_fields)) for t in document.output_types_to_generate]
            args_info.extend((a.name, _field_names(a.fields)) for a in document.output_args_types())

        models_info = []
        if should(EmitBlockKind.MODELS):
            models_info = [(m.name, _field_names(m.emitted_fields)) for m in document.models.values()]

        inputs_info = []
        if should(EmitBlockKind.INPUTS):
            inputs_info = [(t.name, _field_names(t.emitted_fields)) for t in document.input_types.values()]

        extra = [ImportEntry(relative_module(ENHANCE_MODULE, CRUD_DIR), name) for _, name in crud_resolvers]
        extra += [ImportEntry(relative_module(ENHANCE_MODULE, RELATIONS_DIR), name) for _, name in relation_resolvers]
        import_set = self.imports.resolve(
            ENHANCE_MODULE,
            "enhance",
            (),
            framework=(ImportEntry("strawberry.extensions", "FieldExtension"),),
            extra=extra,
        )

        return self.renderer.render(
            "enhance.py.jinja2",
            imports=import_set.render(),
            crud_resolvers=crud_resolvers,
            action_operations=action_operations,
            relation_resolvers=relation_resolvers,
            relation_info=relation_info,
            relation_models=[r.name for r in document.relation_models],
            models_info=models_info,
            inputs_info=inputs_info,
            outputs_info=outputs_info,
            args_info=args_info,
        )
