"""
Rendering module.

Field declaration descriptors and the Jinja2 template renderer.
"""

from __future__ import annotations

from .declarations import (
    SCALAR_PYTHON_TYPES,
    DeclarationStyle,
    FieldDeclaration,
    build_declaration,
    declaration_style,
    lazy_reference,
    python_type,
)
from .renderer import TEMPLATE_DIR, TemplateRenderer, generation_comment

__all__ = [
    "DeclarationStyle",
    "FieldDeclaration",
    "SCALAR_PYTHON_TYPES",
    "TEMPLATE_DIR",
    "TemplateRenderer",
    "build_declaration",
    "declaration_style",
    "generation_comment",
    "lazy_reference",
    "python_type",
]
