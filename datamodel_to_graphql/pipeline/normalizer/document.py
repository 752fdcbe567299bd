"""
Document node definitions.

The Document is the enriched, read-only view of the schema IR that every
block generator consumes. All type references are resolved, omission and
remap decisions are made, and derived collections (relation models, CRUD
operation mappings) are computed once. Nodes are frozen and collections
are tuples or read-only mappings.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum


class TypeLocation(str, Enum):
    """Where the target type of a field is generated."""

    SCALAR = "scalar"
    ENUM_TYPES = "enumTypes"
    INPUT_OBJECT_TYPES = "inputObjectTypes"
    OUTPUT_OBJECT_TYPES = "outputObjectTypes"
    MODEL_TYPES = "modelTypes"


class FieldKind(str, Enum):
    SCALAR = "scalar"
    ENUM = "enum"
    RELATION = "relation"
    # Reference to a generated input or output object type
    OBJECT = "object"


class OperationKind(str, Enum):
    QUERY = "Query"
    MUTATION = "Mutation"


@dataclass(frozen=True)
class TypeDescriptor:
    """A resolved target type."""

    location: TypeLocation
    type_name: str
    is_list: bool = False


@dataclass(frozen=True)
class DocumentField:
    """A field of a model, input type, output type or args type."""

    name: str
    exposed_name: str
    kind: FieldKind
    target: TypeDescriptor
    is_nullable: bool
    is_id: bool = False
    is_omitted: bool = False
    args_type_name: str | None = None
    args: tuple[DocumentField, ...] = ()
    documentation: str | None = None

    @property
    def has_mapped_name(self) -> bool:
        return self.exposed_name != self.name

    @property
    def is_list(self) -> bool:
        return self.target.is_list


@dataclass(frozen=True)
class RelationField:
    """A relation field paired with its counterpart on the related model."""

    field_name: str
    related_model: str
    related_field: str | None
    relation_name: str | None
    from_fields: tuple[str, ...] = ()
    to_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class Model:
    name: str
    fields: tuple[DocumentField, ...]
    primary_key: tuple[str, ...]
    primary_key_name: str | None
    relation_fields: tuple[RelationField, ...]
    unique_fields: tuple[tuple[str, ...], ...] = ()
    documentation: str | None = None

    @property
    def emitted_fields(self) -> tuple[DocumentField, ...]:
        return tuple(f for f in self.fields if not f.is_omitted)

    @property
    def identifying_fields(self) -> tuple[str, ...]:
        """Fields that identify a single record: the primary key, else the first unique set."""
        if self.primary_key:
            return self.primary_key
        return self.unique_fields[0] if self.unique_fields else ()

    def get_field(self, name: str) -> DocumentField | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None


@dataclass(frozen=True)
class EnumType:
    name: str
    values: tuple[str, ...]
    documentation: str | None = None


@dataclass(frozen=True)
class InputType:
    name: str
    fields: tuple[DocumentField, ...]
    documentation: str | None = None

    @property
    def emitted_fields(self) -> tuple[DocumentField, ...]:
        return tuple(f for f in self.fields if not f.is_omitted)


@dataclass(frozen=True)
class OutputType:
    name: str
    fields: tuple[DocumentField, ...]
    documentation: str | None = None

    @property
    def emitted_fields(self) -> tuple[DocumentField, ...]:
        return tuple(f for f in self.fields if not f.is_omitted)


@dataclass(frozen=True)
class ArgsType:
    """An auxiliary argument type backing an accessor-style member."""

    name: str
    fields: tuple[DocumentField, ...]

    @property
    def emitted_fields(self) -> tuple[DocumentField, ...]:
        return self.fields


@dataclass(frozen=True)
class RelationModel:
    """A model classified as a pure join table between two models."""

    name: str
    first_model: str
    second_model: str
    foreign_keys: tuple[str, ...]


@dataclass(frozen=True)
class ModelAction:
    """One CRUD action of a model, bound to its operation field."""

    kind: str  # "findMany", "createOne", ...
    operation: OperationKind
    method_name: str
    args_type_name: str | None
    args: tuple[DocumentField, ...]
    return_type: TypeDescriptor
    is_nullable: bool


@dataclass(frozen=True)
class ModelMapping:
    model: str
    actions: tuple[ModelAction, ...]


@dataclass(frozen=True)
class Document:
    """The complete enriched document for one generation run."""

    models: Mapping[str, Model]
    enums: Mapping[str, EnumType]
    input_types: Mapping[str, InputType]
    output_types: Mapping[str, OutputType]
    relation_models: tuple[RelationModel, ...]
    model_mappings: tuple[ModelMapping, ...]

    # Output types emitted by the outputs block (no root or model types)
    output_types_to_generate: tuple[OutputType, ...]

    # Relation args per model: model name -> args types of its relation fields
    relation_args: Mapping[str, tuple[ArgsType, ...]]

    def is_model_type_name(self, name: str) -> bool:
        return name in self.models

    def is_relation_model(self, name: str) -> bool:
        return any(relation_model.name == name for relation_model in self.relation_models)

    def get_model_mapping(self, model_name: str) -> ModelMapping | None:
        for mapping in self.model_mappings:
            if mapping.model == model_name:
                return mapping
        return None

    def output_args_types(self) -> tuple[ArgsType, ...]:
        """Args types of output fields that take parameters, in declaration order."""
        args_types = []
        for output_type in self.output_types_to_generate:
            for field in output_type.emitted_fields:
                if field.args_type_name:
                    args_types.append(ArgsType(field.args_type_name, field.args))
        return tuple(args_types)
