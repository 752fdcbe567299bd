"""
Field declaration descriptors.

Every emitted field is turned into a plain FieldDeclaration before
rendering. The way the declaration is written out (its style) is a pure
function of the descriptor and never special-cased per field.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum

from ...utils import escape_identifier
from ..config import GeneratorOptions
from ..imports import CUSTOM_SCALARS, ModuleParts, relative_module, type_module
from ..normalizer import DocumentField, FieldKind, TypeLocation

SCALAR_PYTHON_TYPES = {
    "Int": "int",
    "Float": "float",
    "String": "str",
    "Boolean": "bool",
    "DateTime": "datetime.datetime",
    "Json": "JSON",
    **CUSTOM_SCALARS,
}


class DeclarationStyle(str, Enum):
    PLAIN = "plain"
    # Storage under the GraphQL name plus a read/write property under the exposed name
    ACCESSOR_PAIR = "accessor_pair"
    # Private storage plus a resolver method taking an args type
    ARGS_ACCESSOR = "args_accessor"
    # Private storage for a model relation, resolved by the relation resolvers
    RELATION = "relation"


@dataclass(frozen=True)
class FieldDeclaration:
    """
    Renderable description of one field.

    Attributes:
        name: Python storage attribute (keyword-escaped)
        graphql_name: Name of the field in the GraphQL schema
        exposed_attr: Python attribute of the exposed accessor
        python_type: Fully rendered annotation
        is_nullable: Whether the field may be null
        args_type_name: Args type of an accessor-style field
        is_relation: Model relation field
        description: Field documentation
        default: Default value expression of nullable fields
        emit_metadata: Always pass the GraphQL name to strawberry.field
    """

    name: str
    graphql_name: str
    exposed_attr: str
    python_type: str
    is_nullable: bool
    args_type_name: str | None = None
    is_relation: bool = False
    description: str | None = None
    default: str | None = None
    emit_metadata: bool = True

    @property
    def style(self) -> DeclarationStyle:
        return declaration_style(self)

    @property
    def accessor_name(self) -> str:
        """Method name of the args accessor."""
        return f"get_{self.name.rstrip('_')}"

    def field_arguments(self) -> list[str]:
        """Keyword arguments of strawberry.field() for this declaration."""
        kwargs = []
        if self.emit_metadata or self.graphql_name != self.name:
            kwargs.append(f"name={json.dumps(self.graphql_name)}")
        if self.description:
            kwargs.append(f"description={json.dumps(self.description)}")
        return kwargs

    def accessor_arguments(self) -> list[str]:
        """Keyword arguments of the accessor decorator, which always names the field."""
        kwargs = [f"name={json.dumps(self.graphql_name)}"]
        if self.description:
            kwargs.append(f"description={json.dumps(self.description)}")
        return kwargs

    def assignment(self) -> str | None:
        """Right-hand side of the storage declaration, if any."""
        kwargs = self.field_arguments()
        if not kwargs:
            return self.default
        if self.default is not None:
            kwargs.append(f"default={self.default}")
        return f"strawberry.field({', '.join(kwargs)})"

    def storage_line(self) -> str:
        """The storage attribute declaration, without indentation."""
        if self.style in (DeclarationStyle.RELATION, DeclarationStyle.ARGS_ACCESSOR):
            line = f"{self.name}: strawberry.Private[{self.python_type}]"
            value = self.default
        else:
            line = f"{self.name}: {self.python_type}"
            value = self.assignment()
        return line if value is None else f"{line} = {value}"


def declaration_style(declaration: FieldDeclaration) -> DeclarationStyle:
    """Select how a field declaration is written out."""
    if declaration.is_relation:
        return DeclarationStyle.RELATION
    if declaration.args_type_name:
        return DeclarationStyle.ARGS_ACCESSOR
    if declaration.exposed_attr != declaration.name:
        return DeclarationStyle.ACCESSOR_PAIR
    return DeclarationStyle.PLAIN


def lazy_reference(owner_module: ModuleParts, location: TypeLocation, type_name: str) -> str:
    """Annotation of a generated type that is imported when the schema is built."""
    target_module = type_module(location, type_name)
    if target_module == owner_module:
        return type_name
    return f"typing.Annotated[{json.dumps(type_name)}, strawberry.lazy({json.dumps(relative_module(owner_module, target_module))})]"


def python_type(field: DocumentField, options: GeneratorOptions, owner_module: ModuleParts | None = None) -> str:
    """
    Render the annotation of a field.

    Args:
        field: The document field
        options: Generator options (ID rendering)
        owner_module: Module declaring the field; object types are then
            referenced lazily so that generated modules never import each
            other at runtime

    Returns:
        The annotation, e.g. "typing.Optional[list[Post]]"
    """
    target = field.target
    if target.location is TypeLocation.SCALAR:
        if field.is_id and options.emit_id_as_id_type:
            annotation = "strawberry.ID"
        else:
            annotation = SCALAR_PYTHON_TYPES[target.type_name]
    elif target.location is TypeLocation.ENUM_TYPES or owner_module is None:
        annotation = target.type_name
    else:
        annotation = lazy_reference(owner_module, target.location, target.type_name)
    if target.is_list:
        annotation = f"list[{annotation}]"
    if field.is_nullable:
        annotation = f"typing.Optional[{annotation}]"
    return annotation


def build_declaration(
    field: DocumentField,
    options: GeneratorOptions,
    *,
    is_input: bool = False,
    is_model: bool = False,
    owner_module: ModuleParts | None = None,
) -> FieldDeclaration:
    """
    Build the declaration of a document field.

    Args:
        field: The document field
        options: Generator options
        is_input: Field of an input or args type (unset defaults)
        is_model: Field of a model type (relations are private storage)
        owner_module: Module declaring the field, for lazy type references

    Returns:
        The FieldDeclaration
    """
    annotation = python_type(field, options, owner_module)
    is_relation = is_model and field.kind is FieldKind.RELATION

    default = None
    if field.is_nullable or is_relation:
        default = "strawberry.UNSET" if is_input else "None"
    if is_relation and not field.is_nullable:
        annotation = f"typing.Optional[{annotation}]"

    return FieldDeclaration(
        name=escape_identifier(field.name),
        graphql_name=field.exposed_name if field.has_mapped_name else field.name,
        exposed_attr=escape_identifier(field.exposed_name),
        python_type=annotation,
        is_nullable=field.is_nullable,
        args_type_name=None if is_relation else field.args_type_name,
        is_relation=is_relation,
        description=field.documentation,
        default=default,
        emit_metadata=options.emit_decorator_metadata,
    )
