"""
Normalizer module.

Contains the Document node definitions and the schema normalizer.
"""

from __future__ import annotations

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
from .normalizer import KNOWN_SCALARS, SchemaNormalizer, normalize

__all__ = [
    "ArgsType",
    "Document",
    "DocumentField",
    "EnumType",
    "FieldKind",
    "InputType",
    "KNOWN_SCALARS",
    "Model",
    "ModelAction",
    "ModelMapping",
    "OperationKind",
    "OutputType",
    "RelationField",
    "RelationModel",
    "SchemaNormalizer",
    "TypeDescriptor",
    "TypeLocation",
    "normalize",
]
