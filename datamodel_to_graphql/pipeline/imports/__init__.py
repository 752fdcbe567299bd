"""
Import resolver module.

Maps generated types to their modules and computes cross-module imports.
"""

from __future__ import annotations

from .locations import (
    CRUD_DIR,
    ENHANCE_MODULE,
    ENUMS_DIR,
    HELPERS_MODULE,
    INPUTS_DIR,
    MODELS_DIR,
    OUTPUT_ARGS_DIR,
    OUTPUTS_DIR,
    RELATIONS_DIR,
    RESOLVERS_DIR,
    SCALARS_MODULE,
    ModuleParts,
    crud_args_module,
    crud_resolver_module,
    module_file,
    output_args_module,
    package_init,
    relations_args_module,
    relations_resolver_module,
    relative_module,
    type_module,
)
from .resolver import CUSTOM_SCALARS, ImportEntry, ImportResolver, ImportSet

__all__ = [
    "CRUD_DIR",
    "CUSTOM_SCALARS",
    "ENHANCE_MODULE",
    "ENUMS_DIR",
    "HELPERS_MODULE",
    "INPUTS_DIR",
    "ImportEntry",
    "ImportResolver",
    "ImportSet",
    "MODELS_DIR",
    "ModuleParts",
    "OUTPUT_ARGS_DIR",
    "OUTPUTS_DIR",
    "RELATIONS_DIR",
    "RESOLVERS_DIR",
    "SCALARS_MODULE",
    "crud_args_module",
    "crud_resolver_module",
    "module_file",
    "output_args_module",
    "package_init",
    "relations_args_module",
    "relations_resolver_module",
    "relative_module",
    "type_module",
]
