"""
Schema IR node definitions.

These nodes mirror the normalized data model produced by the upstream
schema parser: models with their fields and relations, enums, and the
derived input/output type shapes. No reference is resolved at this stage.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RawField:
    """A model field as declared in the data model."""

    name: str = ""
    kind: str = "scalar"  # "scalar", "enum" or "object"
    type: str = ""
    is_list: bool = False
    is_required: bool = False
    is_id: bool = False
    relation_name: str | None = None
    relation_from_fields: list[str] = field(default_factory=list)
    relation_to_fields: list[str] = field(default_factory=list)
    documentation: str | None = None
    # Name exposed in the API when it differs from the storage name
    exposed_name: str | None = None


@dataclass
class RawModel:
    name: str = ""
    fields: list[RawField] = field(default_factory=list)
    primary_key: list[str] = field(default_factory=list)
    primary_key_name: str | None = None
    unique_fields: list[list[str]] = field(default_factory=list)
    documentation: str | None = None


@dataclass
class RawEnum:
    name: str = ""
    values: list[str] = field(default_factory=list)
    documentation: str | None = None


@dataclass
class RawTypeRef:
    """One candidate type of an input field, or the type of an output field."""

    type: str = ""
    location: str = "scalar"  # "scalar", "enumTypes", "inputObjectTypes", "outputObjectTypes"
    is_list: bool = False


@dataclass
class RawInputField:
    name: str = ""
    is_required: bool = False
    is_nullable: bool = False
    input_types: list[RawTypeRef] = field(default_factory=list)
    documentation: str | None = None


@dataclass
class RawInputType:
    name: str = ""
    fields: list[RawInputField] = field(default_factory=list)
    documentation: str | None = None


@dataclass
class RawOutputField:
    name: str = ""
    is_nullable: bool = False
    is_required: bool = True
    output_type: RawTypeRef = field(default_factory=RawTypeRef)
    args: list[RawInputField] = field(default_factory=list)
    documentation: str | None = None


@dataclass
class RawOutputType:
    name: str = ""
    fields: list[RawOutputField] = field(default_factory=list)
    documentation: str | None = None


@dataclass
class RawModelOperations:
    """Maps CRUD actions of one model to operation field names."""

    model: str = ""
    # action -> operation field name, e.g. {"findMany": "users"}
    actions: dict[str, str] = field(default_factory=dict)


@dataclass
class SchemaIR:
    """The complete schema IR consumed by the generator."""

    models: list[RawModel] = field(default_factory=list)
    enums: list[RawEnum] = field(default_factory=list)
    input_types: list[RawInputType] = field(default_factory=list)
    output_types: list[RawOutputType] = field(default_factory=list)
    model_operations: list[RawModelOperations] = field(default_factory=list)

    # Raw dictionary, kept for emit_schema_ir
    raw: dict = field(default_factory=dict, repr=False)

    @staticmethod
    def from_dict(d: dict) -> SchemaIR:
        """Create an IR from a flat or a DMMF-shaped dictionary."""
        from .parser import SchemaIRParser

        return SchemaIRParser().parse(d)
