"""
CRUD resolvers block.

One resolver class per model with a query or mutation method per mapped
action, plus the args input type of every action that takes arguments:

    resolvers/crud/<Model>/<Model>CrudResolver.py
    resolvers/crud/<Model>/args/<Action><Model>Args.py
"""

from __future__ import annotations

from dataclasses import dataclass

from ...utils import escape_identifier, snake_case
from ..config import EmitBlockKind
from ..imports import (
    CRUD_DIR,
    HELPERS_MODULE,
    ImportEntry,
    crud_args_module,
    crud_resolver_module,
    relative_module,
)
from ..normalizer import DocumentField, FieldKind, ModelAction, ModelMapping, OperationKind
from ..rendering import python_type
from .base import BarrelEntry, BlockGenerator

# Action -> data client method
CLIENT_METHODS = {
    "findUnique": "find_unique",
    "findUniqueOrThrow": "find_unique_or_raise",
    "findFirst": "find_first",
    "findFirstOrThrow": "find_first_or_raise",
    "findMany": "find_many",
    "createOne": "create",
    "createMany": "create_many",
    "createManyAndReturn": "create_many_and_return",
    "updateOne": "update",
    "updateMany": "update_many",
    "updateManyAndReturn": "update_many_and_return",
    "upsertOne": "upsert",
    "deleteOne": "delete",
    "deleteMany": "delete_many",
    "aggregate": "aggregate",
    "groupBy": "group_by",
}


@dataclass(frozen=True)
class ResolverMethod:
    graphql_name: str
    python_name: str
    decorator: str
    args_type_name: str | None
    return_type: str
    client_method: str


def crud_resolver_name(model_name: str) -> str:
    return f"{model_name}CrudResolver"


def action_field(action: ModelAction) -> DocumentField:
    """The operation field of an action, as seen by the import resolver."""
    return DocumentField(
        name=action.method_name,
        exposed_name=action.method_name,
        kind=FieldKind.OBJECT,
        target=action.return_type,
        is_nullable=action.is_nullable,
        args_type_name=action.args_type_name,
        args=action.args,
    )


class CrudResolversBlockGenerator(BlockGenerator):
    kind = EmitBlockKind.CRUD_RESOLVERS

    def generate_items(self) -> int:
        resolver_entries = []
        resolver_names = []
        items = 0
        for mapping in self.document.model_mappings:
            if not mapping.actions:
                continue
            args_names = self._generate_model_package(mapping)
            resolver_name = crud_resolver_name(mapping.model)
            resolver_names.append(resolver_name)
            resolver_entries.append(BarrelEntry(mapping.model, resolver_name))
            resolver_entries.extend(BarrelEntry(mapping.model, name) for name in args_names)
            items += 1 + len(args_names)

        self.write_barrel(CRUD_DIR, resolver_entries, "crud_resolvers", resolver_names)
        return items

    def _generate_model_package(self, mapping: ModelMapping) -> list[str]:
        """Write the resolver and args modules of one model; return the args type names."""
        model_name = mapping.model
        args_names = []
        for action in mapping.actions:
            if not action.args_type_name:
                continue
            module = crud_args_module(model_name, action.args_type_name)
            content = self.render_type_class(
                "input",
                module,
                action.args_type_name,
                action.args,
                is_input=True,
                args_module=lambda name: crud_args_module(model_name, name),
            )
            self.write_module(module, content)
            args_names.append(action.args_type_name)

        resolver_name = crud_resolver_name(model_name)
        self.write_module(crud_resolver_module(model_name), self._render_resolver(mapping))

        package = (*CRUD_DIR, model_name)
        if args_names:
            self.write_barrel((*package, "args"), [BarrelEntry(name, name) for name in args_names])
        self.write_barrel(
            package,
            [BarrelEntry(resolver_name, resolver_name)] + [BarrelEntry("args", name) for name in args_names],
        )
        return args_names

    def _render_resolver(self, mapping: ModelMapping) -> str:
        model_name = mapping.model
        module = crud_resolver_module(model_name)
        helpers = relative_module(module, HELPERS_MODULE)
        extra = [ImportEntry(helpers, "get_client")]
        if any(action.args_type_name for action in mapping.actions):
            extra.append(ImportEntry(helpers, "transform_args"))

        fields = [action_field(action) for action in mapping.actions]
        import_set = self.imports.resolve(
            module,
            crud_resolver_name(model_name),
            fields,
            args_module=lambda name: crud_args_module(model_name, name),
            extra=extra,
        )
        methods = [
            ResolverMethod(
                graphql_name=action.method_name,
                python_name=escape_identifier(snake_case(action.method_name)),
                decorator="mutation" if action.operation is OperationKind.MUTATION else "field",
                args_type_name=action.args_type_name,
                return_type=python_type(field, self.options),
                client_method=CLIENT_METHODS[action.kind],
            )
            for action, field in zip(mapping.actions, fields)
        ]
        return self.renderer.render(
            "crud_resolver.py.jinja2",
            name=crud_resolver_name(model_name),
            imports=import_set.render(),
            methods=methods,
            context_key=self.options.context_client_key,
            client_model=model_name.lower(),
        )
