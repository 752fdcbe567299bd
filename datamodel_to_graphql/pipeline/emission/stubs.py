"""
Declaration stub synthesis.

Builds a .pyi stub from a generated module with the ast module: imports,
TYPE_CHECKING blocks, class decorators and bases, annotations and
signatures are kept, bodies and computed values become `...`. No type
inference or cross-module checking is done.
"""

from __future__ import annotations

import ast
from pathlib import Path

from .atomic_writer import AtomicWriter

# Names whose values are kept verbatim in stubs
_VERBATIM_NAMES = {"__all__"}


def _ellipsis() -> ast.expr:
    return ast.Constant(value=Ellipsis)


def _is_type_checking(test: ast.expr) -> bool:
    if isinstance(test, ast.Name):
        return test.id == "TYPE_CHECKING"
    return isinstance(test, ast.Attribute) and test.attr == "TYPE_CHECKING"


def _is_simple(value: ast.expr) -> bool:
    """Values that are cheap to keep: names, constants and tuples of them."""
    if isinstance(value, (ast.Name, ast.Attribute, ast.Constant, ast.Subscript)):
        return True
    if isinstance(value, ast.Starred):
        return _is_simple(value.value)
    if isinstance(value, (ast.Tuple, ast.List)):
        return all(_is_simple(element) for element in value.elts)
    return False


def _stub_arguments(arguments: ast.arguments) -> ast.arguments:
    arguments.defaults = [_ellipsis() for _ in arguments.defaults]
    arguments.kw_defaults = [None if default is None else _ellipsis() for default in arguments.kw_defaults]
    return arguments


def _stub_body(body: list[ast.stmt], in_class: bool) -> list[ast.stmt]:
    result: list[ast.stmt] = []
    for node in body:
        if isinstance(node, (ast.Import, ast.ImportFrom)):
            result.append(node)
        elif isinstance(node, ast.If) and _is_type_checking(node.test):
            node.body = _stub_body(node.body, in_class) or [ast.Expr(_ellipsis())]
            node.orelse = []
            result.append(node)
        elif isinstance(node, ast.ClassDef):
            node.body = _stub_body(node.body, in_class=True) or [ast.Expr(_ellipsis())]
            result.append(node)
        elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            node.args = _stub_arguments(node.args)
            node.body = [ast.Expr(_ellipsis())]
            result.append(node)
        elif isinstance(node, ast.AnnAssign):
            if node.value is not None:
                node.value = _ellipsis()
            result.append(node)
        elif isinstance(node, ast.Assign):
            names = [target.id for target in node.targets if isinstance(target, ast.Name)]
            if not names:
                continue
            keep = any(name in _VERBATIM_NAMES for name in names) or (not in_class and _is_simple(node.value))
            if not keep:
                node.value = _ellipsis()
            result.append(node)
    return result


def synthesize_stub(source: str, filename: str = "<generated>") -> str:
    """
    Synthesize the stub of one module.

    Args:
        source: Module source
        filename: File name used in syntax errors

    Returns:
        Stub source ending with a newline
    """
    module = ast.parse(source, filename=filename)
    module.body = _stub_body(module.body, in_class=False)
    return ast.unparse(ast.fix_missing_locations(module)) + "\n"


def write_stub(path: Path) -> Path:
    """Write the stub of a source file next to it and return the stub path."""
    stub_path = path.with_suffix(".pyi")
    stub = synthesize_stub(path.read_text(encoding="utf-8"), filename=str(path))
    AtomicWriter(stage="declarations").write(stub_path, stub, validate=False)
    return stub_path


def unresolved_relative_imports(path: Path, root: Path) -> list[str]:
    """
    List relative imports of a module whose target module does not exist.

    Args:
        path: Source file
        root: Root of the generated package; imports may not escape it

    Returns:
        The dotted form of every unresolved import, in source order
    """
    module = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    missing = []
    for node in ast.walk(module):
        if not isinstance(node, ast.ImportFrom) or node.level == 0 or node.module is None:
            continue
        package = path.parent
        for _ in range(node.level - 1):
            package = package.parent
        target = package.joinpath(*node.module.split("."))
        inside_root = package == root or root in package.parents
        if not inside_root or not (target.with_suffix(".py").exists() or (target / "__init__.py").exists()):
            missing.append("." * node.level + node.module)
    return missing
