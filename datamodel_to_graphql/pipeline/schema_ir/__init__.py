"""
Schema IR module.

Contains the raw IR node definitions and the dictionary parser.
"""

from __future__ import annotations

from .nodes import (
    RawEnum,
    RawField,
    RawInputField,
    RawInputType,
    RawModel,
    RawModelOperations,
    RawOutputField,
    RawOutputType,
    RawTypeRef,
    SchemaIR,
)
from .parser import SchemaIRParser

__all__ = [
    "RawEnum",
    "RawField",
    "RawInputField",
    "RawInputType",
    "RawModel",
    "RawModelOperations",
    "RawOutputField",
    "RawOutputType",
    "RawTypeRef",
    "SchemaIR",
    "SchemaIRParser",
]
