"""
Module location convention of the generated package.

Every generated type lives in a module named after it, under one
subdirectory per block kind. Locations are tuples of module path parts
relative to the package root, e.g. ("resolvers", "inputs", "PostWhereInput").
"""

from __future__ import annotations

from pathlib import Path

from ..normalizer import TypeLocation

ModuleParts = tuple[str, ...]

ENUMS_DIR: ModuleParts = ("enums",)
MODELS_DIR: ModuleParts = ("models",)
RESOLVERS_DIR: ModuleParts = ("resolvers",)
INPUTS_DIR: ModuleParts = ("resolvers", "inputs")
OUTPUTS_DIR: ModuleParts = ("resolvers", "outputs")
OUTPUT_ARGS_DIR: ModuleParts = ("resolvers", "outputs", "args")
CRUD_DIR: ModuleParts = ("resolvers", "crud")
RELATIONS_DIR: ModuleParts = ("resolvers", "relations")

SCALARS_MODULE: ModuleParts = ("scalars",)
HELPERS_MODULE: ModuleParts = ("helpers",)
ENHANCE_MODULE: ModuleParts = ("enhance",)


def type_module(location: TypeLocation, type_name: str) -> ModuleParts:
    """Module holding a generated enum, model, input or output type."""
    if location is TypeLocation.ENUM_TYPES:
        return (*ENUMS_DIR, type_name)
    if location is TypeLocation.MODEL_TYPES:
        return (*MODELS_DIR, type_name)
    if location is TypeLocation.INPUT_OBJECT_TYPES:
        return (*INPUTS_DIR, type_name)
    if location is TypeLocation.OUTPUT_OBJECT_TYPES:
        return (*OUTPUTS_DIR, type_name)
    raise ValueError(f"Scalars have no generated module: {type_name}")


def output_args_module(args_type_name: str) -> ModuleParts:
    return (*OUTPUT_ARGS_DIR, args_type_name)


def crud_resolver_module(model_name: str) -> ModuleParts:
    return (*CRUD_DIR, model_name, f"{model_name}CrudResolver")


def crud_args_module(model_name: str, args_type_name: str) -> ModuleParts:
    return (*CRUD_DIR, model_name, "args", args_type_name)


def relations_resolver_module(model_name: str) -> ModuleParts:
    return (*RELATIONS_DIR, model_name, f"{model_name}RelationsResolver")


def relations_args_module(model_name: str, args_type_name: str) -> ModuleParts:
    return (*RELATIONS_DIR, model_name, "args", args_type_name)


def module_file(parts: ModuleParts) -> Path:
    """Relative source file path of a module."""
    return Path(*parts[:-1], f"{parts[-1]}.py")


def package_init(directory: ModuleParts) -> Path:
    """Relative path of the barrel file of a package directory."""
    return Path(*directory, "__init__.py")


def relative_module(from_module: ModuleParts, to_module: ModuleParts) -> str:
    """
    Compute the dotted relative import of one module from another.

    Args:
        from_module: Module doing the import
        to_module: Module being imported

    Returns:
        Relative module string, e.g. "...enums.Color" or ".PostWhereInput"
    """
    from_package = from_module[:-1]
    common = 0
    for a, b in zip(from_package, to_module):
        if a != b:
            break
        common += 1
    dots = "." * (len(from_package) - common + 1)
    return dots + ".".join(to_module[common:])
