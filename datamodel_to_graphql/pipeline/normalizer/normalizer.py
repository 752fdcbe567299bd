"""
Schema normalizer that transforms the schema IR into a Document.

Phase 1 of the pipeline. Pass 1 indexes every declared model, enum,
input type and output type by name. Pass 2 resolves field type
references, applies omission and remap rules, pairs relation fields,
classifies join tables and maps CRUD actions to operation fields.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from ...utils import pascal_case
from ..config import GeneratorOptions
from ..errors import SchemaResolutionError
from ..schema_ir import (
    RawField,
    RawInputField,
    RawModel,
    RawOutputField,
    RawTypeRef,
    SchemaIR,
)
from .document import (
    ArgsType,
    Document,
    DocumentField,
    EnumType,
    FieldKind,
    InputType,
    Model,
    ModelAction,
    ModelMapping,
    OperationKind,
    OutputType,
    RelationField,
    RelationModel,
    TypeDescriptor,
    TypeLocation,
)

logger = logging.getLogger(__name__)

KNOWN_SCALARS = frozenset(
    {
        "Int",
        "Float",
        "String",
        "Boolean",
        "DateTime",
        "Json",
        "Decimal",
        "BigInt",
        "Bytes",
    }
)

ROOT_OPERATION_TYPES = (OperationKind.QUERY, OperationKind.MUTATION)

# Canonical action order; mappings are always emitted in this order
MODEL_ACTIONS = (
    "findUnique",
    "findUniqueOrThrow",
    "findFirst",
    "findFirstOrThrow",
    "findMany",
    "createOne",
    "createMany",
    "createManyAndReturn",
    "updateOne",
    "updateMany",
    "updateManyAndReturn",
    "upsertOne",
    "deleteOne",
    "deleteMany",
    "aggregate",
    "groupBy",
)


class SchemaNormalizer:
    """Builds the Document from the schema IR."""

    def __init__(self, options: GeneratorOptions):
        """
        Initialize the normalizer.

        Args:
            options: Resolved generator options (omission and remap rules)
        """
        self.options = options

        # Pass 1 indices
        self.raw_models: dict[str, RawModel] = {}
        self.enum_names: set[str] = set()
        self.input_type_names: set[str] = set()
        self.output_type_names: set[str] = set()

        # (type name, field name) pairs actually seen, to report no-op rules
        self._seen_fields: dict[str, set[str]] = {}

    def normalize(self, schema: SchemaIR) -> Document:
        """
        Normalize the schema IR.

        Args:
            schema: The parsed schema IR

        Returns:
            The immutable Document

        Raises:
            SchemaResolutionError: If a type reference cannot be resolved
        """
        self._index(schema)

        enums = {e.name: EnumType(e.name, tuple(e.values), e.documentation) for e in schema.enums}
        models = {m.name: self._normalize_model(m, schema) for m in schema.models}
        input_types = {t.name: self._normalize_input_type(t.name, t.fields, t.documentation) for t in schema.input_types}
        output_types = {t.name: self._normalize_output_type(t.name, t.fields, t.documentation) for t in schema.output_types}

        self._report_unmatched_rules()

        output_types_to_generate = tuple(
            t
            for t in output_types.values()
            if t.name not in self.raw_models and t.name not in (OperationKind.QUERY.value, OperationKind.MUTATION.value)
        )

        return Document(
            models=MappingProxyType(models),
            enums=MappingProxyType(enums),
            input_types=MappingProxyType(input_types),
            output_types=MappingProxyType(output_types),
            relation_models=tuple(
                relation_model
                for relation_model in (self._classify_relation_model(m) for m in models.values())
                if relation_model is not None
            ),
            model_mappings=self._build_model_mappings(schema, output_types),
            output_types_to_generate=output_types_to_generate,
            relation_args=MappingProxyType(
                {
                    model.name: tuple(
                        ArgsType(f.args_type_name, f.args) for f in model.emitted_fields if f.args_type_name
                    )
                    for model in models.values()
                }
            ),
        )

    # ------------------------------------------------------------------
    # Pass 1
    # ------------------------------------------------------------------

    def _index(self, schema: SchemaIR) -> None:
        """Index every declared type by name and check global uniqueness."""
        owners: dict[str, str] = {}

        def register(name: str, category: str) -> None:
            if name in owners:
                raise SchemaResolutionError(
                    f"Type name {name!r} is declared both as {owners[name]} and as {category}",
                    type_name=name,
                )
            owners[name] = category

        for model in schema.models:
            register(model.name, "model")
            self.raw_models[model.name] = model
        for enum in schema.enums:
            register(enum.name, "enum")
            self.enum_names.add(enum.name)
        for input_type in schema.input_types:
            register(input_type.name, "input type")
            self.input_type_names.add(input_type.name)
        for output_type in schema.output_types:
            self.output_type_names.add(output_type.name)
            # Model output types share the model's name
            if output_type.name in self.raw_models and owners.get(output_type.name) == "model":
                continue
            register(output_type.name, "output type")

    # ------------------------------------------------------------------
    # Pass 2
    # ------------------------------------------------------------------

    def _normalize_model(self, raw: RawModel, schema: SchemaIR) -> Model:
        omitted = self._omission_rules(raw.name, self.options.omit_output_fields_by_default)
        overrides = self.options.field_name_overrides.get(raw.name, {})
        model_output = self._find_output_type(schema, raw.name)
        self._seen_fields[raw.name] = {f.name for f in raw.fields}

        fields = []
        relation_fields = []
        for raw_field in raw.fields:
            target = self._resolve_model_field(raw, raw_field)
            kind = {
                "scalar": FieldKind.SCALAR,
                "enum": FieldKind.ENUM,
                "object": FieldKind.RELATION,
            }[raw_field.kind]

            args_type_name = None
            args: tuple[DocumentField, ...] = ()
            if kind is FieldKind.RELATION:
                relation_fields.append(self._pair_relation(raw, raw_field))
                output_field = self._find_output_field(model_output, raw_field.name)
                if output_field is not None and output_field.args:
                    args_type_name = f"{raw.name}{pascal_case(raw_field.name)}Args"
                    args = self._normalize_args(args_type_name, output_field.args)

            exposed_name = overrides.get(raw_field.name) or raw_field.exposed_name or raw_field.name
            fields.append(
                DocumentField(
                    name=raw_field.name,
                    exposed_name=exposed_name,
                    kind=kind,
                    target=target,
                    is_nullable=not raw_field.is_required,
                    is_id=raw_field.is_id,
                    is_omitted=raw_field.name in omitted,
                    args_type_name=args_type_name,
                    args=args,
                    documentation=raw_field.documentation,
                )
            )

        primary_key = tuple(raw.primary_key) or tuple(f.name for f in raw.fields if f.is_id)
        return Model(
            name=raw.name,
            fields=tuple(fields),
            primary_key=primary_key,
            primary_key_name=raw.primary_key_name,
            unique_fields=tuple(tuple(u) for u in raw.unique_fields),
            relation_fields=tuple(relation_fields),
            documentation=raw.documentation,
        )

    def _resolve_model_field(self, model: RawModel, field: RawField) -> TypeDescriptor:
        if field.kind == "object":
            if field.type not in self.raw_models:
                raise self._dangling(model.name, field.name, field.type, "model")
            return TypeDescriptor(TypeLocation.MODEL_TYPES, field.type, field.is_list)
        if field.kind == "enum":
            if field.type not in self.enum_names:
                raise self._dangling(model.name, field.name, field.type, "enum")
            return TypeDescriptor(TypeLocation.ENUM_TYPES, field.type, field.is_list)
        if field.kind != "scalar":
            raise SchemaResolutionError(
                f"Unknown field kind {field.kind!r} for {model.name}.{field.name}",
                type_name=model.name,
                field_name=field.name,
            )
        if field.type not in KNOWN_SCALARS:
            raise self._dangling(model.name, field.name, field.type, "scalar")
        return TypeDescriptor(TypeLocation.SCALAR, field.type, field.is_list)

    def _pair_relation(self, model: RawModel, field: RawField) -> RelationField:
        """Find the field on the related model that closes the relation."""
        related = self.raw_models[field.type]
        related_field = None
        for candidate in related.fields:
            if candidate.kind != "object" or candidate.relation_name != field.relation_name:
                continue
            if related.name == model.name and candidate.name == field.name:
                continue
            related_field = candidate.name
            break
        return RelationField(
            field_name=field.name,
            related_model=field.type,
            related_field=related_field,
            relation_name=field.relation_name,
            from_fields=tuple(field.relation_from_fields),
            to_fields=tuple(field.relation_to_fields),
        )

    def _normalize_input_type(self, name: str, raw_fields: list[RawInputField], documentation: str | None) -> InputType:
        omitted = self._omission_rules(name, self.options.omit_input_fields_by_default)
        overrides = self._input_type_overrides(name)
        self._seen_fields[name] = {f.name for f in raw_fields}

        fields = []
        for raw_field in raw_fields:
            field = self._normalize_input_field(name, raw_field)
            exposed_name = overrides.get(raw_field.name, raw_field.name)
            fields.append(
                DocumentField(
                    name=field.name,
                    exposed_name=exposed_name,
                    kind=field.kind,
                    target=field.target,
                    is_nullable=field.is_nullable,
                    is_omitted=raw_field.name in omitted,
                    documentation=field.documentation,
                )
            )
        return InputType(name=name, fields=tuple(fields), documentation=documentation)

    def _input_type_overrides(self, input_type_name: str) -> Mapping[str, str]:
        """Remaps of an input type, inherited from its model unless overridden.

        The owning model is the one with the longest name that prefixes the
        input type name ("UserCreateInput" belongs to "User", not "Use").
        """
        inherited: dict[str, str] = {}
        owner = None
        for model_name in self.raw_models:
            if input_type_name.startswith(model_name) and (owner is None or len(model_name) > len(owner)):
                owner = model_name
        if owner is not None:
            model_overrides = self.options.field_name_overrides.get(owner, {})
            for raw_field in self.raw_models[owner].fields:
                exposed_name = model_overrides.get(raw_field.name) or raw_field.exposed_name
                if exposed_name and exposed_name != raw_field.name:
                    inherited[raw_field.name] = exposed_name
        inherited.update(self.options.field_name_overrides.get(input_type_name, {}))
        return inherited

    def _normalize_input_field(self, owner: str, raw_field: RawInputField) -> DocumentField:
        selected = self._select_input_type(owner, raw_field)
        target = self._resolve_type_ref(owner, raw_field.name, selected)
        return DocumentField(
            name=raw_field.name,
            exposed_name=raw_field.name,
            kind=self._kind_of(target),
            target=target,
            is_nullable=not raw_field.is_required,
            documentation=raw_field.documentation,
        )

    def _select_input_type(self, owner: str, raw_field: RawInputField) -> RawTypeRef:
        """Pick the generated type of an input field among its candidates.

        Input object types win over enums, enums over scalars. Unchecked
        variants are skipped unless enabled, and list variants are preferred
        inside the winning group. With simple inputs, the update operation
        wrappers (`*FieldUpdateOperationsInput`) give way to the plain value
        type they wrap.
        """
        candidates = [
            c
            for c in raw_field.input_types
            if c.location in ("inputObjectTypes", "enumTypes", "scalar") and not (c.location == "scalar" and c.type == "Null")
        ]
        if self.options.use_simple_inputs:
            simple = [c for c in candidates if not c.type.endswith("FieldUpdateOperationsInput")]
            candidates = simple or candidates
        objects = [c for c in candidates if c.location == "inputObjectTypes"]
        checked_objects = [c for c in objects if self.options.use_unchecked_scalar_inputs or "Unchecked" not in c.type]
        enums = [c for c in candidates if c.location == "enumTypes"]
        scalars = [c for c in candidates if c.location == "scalar"]

        for group in (checked_objects, objects, enums, scalars):
            if group:
                return next((c for c in group if c.is_list), group[0])
        raise SchemaResolutionError(
            f"No usable input type for {owner}.{raw_field.name}",
            type_name=owner,
            field_name=raw_field.name,
        )

    def _normalize_output_type(self, name: str, raw_fields: list[RawOutputField], documentation: str | None) -> OutputType:
        omitted = self._omission_rules(name, self.options.omit_output_fields_by_default)
        overrides = self.options.field_name_overrides.get(name, {})
        if name not in self.raw_models:
            self._seen_fields[name] = {f.name for f in raw_fields}

        fields = []
        for raw_field in raw_fields:
            target = self._resolve_type_ref(name, raw_field.name, raw_field.output_type)
            args_type_name = None
            args: tuple[DocumentField, ...] = ()
            if raw_field.args:
                args_type_name = f"{name}{pascal_case(raw_field.name)}Args"
                args = self._normalize_args(args_type_name, raw_field.args)
            fields.append(
                DocumentField(
                    name=raw_field.name,
                    exposed_name=overrides.get(raw_field.name, raw_field.name),
                    kind=self._kind_of(target),
                    target=target,
                    is_nullable=raw_field.is_nullable,
                    is_omitted=raw_field.name in omitted,
                    args_type_name=args_type_name,
                    args=args,
                    documentation=raw_field.documentation,
                )
            )
        return OutputType(name=name, fields=tuple(fields), documentation=documentation)

    def _normalize_args(self, args_type_name: str, raw_args: list[RawInputField]) -> tuple[DocumentField, ...]:
        return tuple(self._normalize_input_field(args_type_name, a) for a in raw_args)

    def _resolve_type_ref(self, owner: str, field_name: str, ref: RawTypeRef) -> TypeDescriptor:
        """Resolve an input/output type reference into a descriptor."""
        if ref.location == "scalar":
            if ref.type not in KNOWN_SCALARS:
                raise self._dangling(owner, field_name, ref.type, "scalar")
            return TypeDescriptor(TypeLocation.SCALAR, ref.type, ref.is_list)
        if ref.location == "enumTypes":
            if ref.type not in self.enum_names:
                raise self._dangling(owner, field_name, ref.type, "enum")
            return TypeDescriptor(TypeLocation.ENUM_TYPES, ref.type, ref.is_list)
        if ref.location == "inputObjectTypes":
            if ref.type not in self.input_type_names:
                raise self._dangling(owner, field_name, ref.type, "input type")
            return TypeDescriptor(TypeLocation.INPUT_OBJECT_TYPES, ref.type, ref.is_list)
        if ref.location == "outputObjectTypes":
            if ref.type in self.raw_models:
                return TypeDescriptor(TypeLocation.MODEL_TYPES, ref.type, ref.is_list)
            if ref.type not in self.output_type_names:
                raise self._dangling(owner, field_name, ref.type, "output type")
            return TypeDescriptor(TypeLocation.OUTPUT_OBJECT_TYPES, ref.type, ref.is_list)
        raise SchemaResolutionError(
            f"Unknown type location {ref.location!r} for {owner}.{field_name}",
            type_name=owner,
            field_name=field_name,
        )

    @staticmethod
    def _kind_of(target: TypeDescriptor) -> FieldKind:
        if target.location is TypeLocation.SCALAR:
            return FieldKind.SCALAR
        if target.location is TypeLocation.ENUM_TYPES:
            return FieldKind.ENUM
        return FieldKind.OBJECT

    # ------------------------------------------------------------------
    # Omission rules
    # ------------------------------------------------------------------

    def _omission_rules(self, type_name: str, defaults: Iterable[str]) -> frozenset[str]:
        return frozenset(self.options.omit_fields.get(type_name, ())) | frozenset(defaults)

    def _report_unmatched_rules(self) -> None:
        """Omission rules naming unknown types or fields are no-ops."""
        for type_name, field_names in self.options.omit_fields.items():
            seen = self._seen_fields.get(type_name)
            if seen is None:
                logger.debug("Omission rule for unknown type %s ignored", type_name)
                continue
            for field_name in field_names:
                if field_name not in seen:
                    logger.debug("Omission rule for unknown field %s.%s ignored", type_name, field_name)

    # ------------------------------------------------------------------
    # Derived collections
    # ------------------------------------------------------------------

    def _classify_relation_model(self, model: Model) -> RelationModel | None:
        """Classify a model as a join table between two models.

        A join table has exactly two relation fields that both own their
        foreign keys, a composite primary key spanning exactly those foreign
        keys, and no other non-key fields.
        """
        if len(model.relation_fields) != 2 or len(model.primary_key) < 2:
            return None
        first, second = model.relation_fields
        if not first.from_fields or not second.from_fields:
            return None
        foreign_keys = set(first.from_fields) | set(second.from_fields)
        if set(model.primary_key) != foreign_keys:
            return None
        for field in model.fields:
            if field.kind is not FieldKind.RELATION and field.name not in foreign_keys:
                return None
        return RelationModel(
            name=model.name,
            first_model=first.related_model,
            second_model=second.related_model,
            foreign_keys=model.primary_key,
        )

    def _build_model_mappings(self, schema: SchemaIR, output_types: Mapping[str, OutputType]) -> tuple[ModelMapping, ...]:
        """Bind the CRUD actions of each model to their operation fields."""
        mappings = []
        for operations in schema.model_operations:
            if operations.model not in self.raw_models:
                raise SchemaResolutionError(
                    f"Model operations reference unknown model {operations.model!r}",
                    type_name=operations.model,
                )
            for action in operations.actions:
                if action not in MODEL_ACTIONS:
                    logger.debug("Ignoring unknown action %s of model %s", action, operations.model)

            actions = []
            for action in MODEL_ACTIONS:
                operation_name = operations.actions.get(action)
                if not operation_name:
                    continue
                found = self._find_operation_field(schema, operation_name)
                if found is None:
                    logger.debug("No operation field %s for %s.%s", operation_name, operations.model, action)
                    continue
                operation, raw_field = found
                args_type_name = None
                args: tuple[DocumentField, ...] = ()
                if raw_field.args:
                    args_type_name = f"{pascal_case(action)}{operations.model}Args"
                    args = self._normalize_args(args_type_name, raw_field.args)
                root_field = next(f for f in output_types[operation.value].fields if f.name == operation_name)
                actions.append(
                    ModelAction(
                        kind=action,
                        operation=operation,
                        method_name=operation_name,
                        args_type_name=args_type_name,
                        args=args,
                        return_type=root_field.target,
                        is_nullable=root_field.is_nullable,
                    )
                )
            mappings.append(ModelMapping(model=operations.model, actions=tuple(actions)))
        return tuple(mappings)

    @staticmethod
    def _find_operation_field(schema: SchemaIR, operation_name: str) -> tuple[OperationKind, RawOutputField] | None:
        for operation in ROOT_OPERATION_TYPES:
            root = SchemaNormalizer._find_output_type(schema, operation.value)
            field = SchemaNormalizer._find_output_field(root, operation_name)
            if field is not None:
                return operation, field
        return None

    @staticmethod
    def _find_output_type(schema: SchemaIR, name: str):
        for output_type in schema.output_types:
            if output_type.name == name:
                return output_type
        return None

    @staticmethod
    def _find_output_field(output_type, name: str) -> RawOutputField | None:
        if output_type is None:
            return None
        for field in output_type.fields:
            if field.name == name:
                return field
        return None

    @staticmethod
    def _dangling(owner: str, field_name: str, type_name: str, expected: str) -> SchemaResolutionError:
        return SchemaResolutionError(
            f"{owner}.{field_name} references unknown {expected} {type_name!r}",
            type_name=owner,
            field_name=field_name,
        )


def normalize(raw_schema: SchemaIR | dict, options: GeneratorOptions) -> Document:
    """Build the Document for one run from a SchemaIR or its dictionary form."""
    if isinstance(raw_schema, dict):
        raw_schema = SchemaIR.from_dict(raw_schema)
    return SchemaNormalizer(options).normalize(raw_schema)
