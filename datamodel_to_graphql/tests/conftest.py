import ast
import copy
import json
from pathlib import Path

import pytest

from datamodel_to_graphql.pipeline import GeneratorConfig, normalize
from datamodel_to_graphql.pipeline.blocks import BlockContext
from datamodel_to_graphql.pipeline.imports import ImportResolver
from datamodel_to_graphql.pipeline.rendering import TemplateRenderer

TEST_DATA_DIR = Path(__file__).parent / "test_data"


def _read_schema(name: str = "blog_schema.json") -> dict:
    with open(TEST_DATA_DIR / name) as f:
        return json.load(f)


def _read_barrel_exports(path: Path) -> list[str]:
    """Read the __all__ list of a generated barrel."""
    module = ast.parse(path.read_text())
    for node in module.body:
        if isinstance(node, ast.Assign) and any(isinstance(t, ast.Name) and t.id == "__all__" for t in node.targets):
            return ast.literal_eval(node.value)
    raise AssertionError(f"No __all__ in {path}")


def _build_config(output_dir: Path, **overrides) -> GeneratorConfig:
    """Config for tests: no header comment, no formatter, source mode."""
    config = GeneratorConfig.from_dict(
        {
            "output_dir": str(output_dir),
            "add_generation_comment": False,
            "emit_transpiled_code": False,
        }
    )
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


@pytest.fixture
def make_config():
    """Factory of test configs, called as make_config(output_dir, **overrides)."""
    return _build_config


@pytest.fixture
def barrel_exports():
    """Reader of the __all__ list of a generated barrel."""
    return _read_barrel_exports


@pytest.fixture
def blog_schema() -> dict:
    return copy.deepcopy(_read_schema())


@pytest.fixture
def join_table_schema() -> dict:
    """Two models linked through an explicit join table."""
    return {
        "models": [
            {
                "name": "A",
                "fields": [
                    {"name": "id", "kind": "scalar", "type": "Int", "isRequired": True, "isId": True},
                    {"name": "links", "kind": "object", "type": "AB", "isList": True, "isRequired": True, "relationName": "AToAB"},
                ],
            },
            {
                "name": "B",
                "fields": [
                    {"name": "id", "kind": "scalar", "type": "Int", "isRequired": True, "isId": True},
                    {"name": "links", "kind": "object", "type": "AB", "isList": True, "isRequired": True, "relationName": "ABToB"},
                ],
            },
            {
                "name": "AB",
                "primaryKey": {"fields": ["aId", "bId"]},
                "fields": [
                    {"name": "aId", "kind": "scalar", "type": "Int", "isRequired": True},
                    {"name": "bId", "kind": "scalar", "type": "Int", "isRequired": True},
                    {
                        "name": "a",
                        "kind": "object",
                        "type": "A",
                        "isRequired": True,
                        "relationName": "AToAB",
                        "relationFromFields": ["aId"],
                        "relationToFields": ["id"],
                    },
                    {
                        "name": "b",
                        "kind": "object",
                        "type": "B",
                        "isRequired": True,
                        "relationName": "ABToB",
                        "relationFromFields": ["bId"],
                        "relationToFields": ["id"],
                    },
                ],
            },
        ],
    }


@pytest.fixture
def output_dir(tmp_path) -> Path:
    return tmp_path / "generated"


@pytest.fixture
def options(output_dir):
    return _build_config(output_dir).resolve()


@pytest.fixture
def document(blog_schema, options):
    return normalize(blog_schema, options)


@pytest.fixture
def block_context(document, options) -> BlockContext:
    return BlockContext(
        document=document,
        options=options,
        renderer=TemplateRenderer(options),
        imports=ImportResolver(),
    )
