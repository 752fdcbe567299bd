#!/usr/bin/env python3

import ast

import pytest

from datamodel_to_graphql.pipeline import OutputWriteError, normalize
from datamodel_to_graphql.pipeline.blocks import (
    AuxiliaryFilesBuilder,
    BlockContext,
    CrudResolversBlockGenerator,
    EnumsBlockGenerator,
    InputsBlockGenerator,
    ModelsBlockGenerator,
    OutputsBlockGenerator,
    RelationResolversBlockGenerator,
)
from datamodel_to_graphql.pipeline.blocks.relation_resolvers import resolved_relation_fields, where_expression
from datamodel_to_graphql.pipeline.imports import ImportResolver
from datamodel_to_graphql.pipeline.normalizer import Model
from datamodel_to_graphql.pipeline.rendering import TemplateRenderer


def class_body_names(source: str) -> list[str]:
    module = ast.parse(source)
    cls = next(node for node in module.body if isinstance(node, ast.ClassDef))
    return [node.targets[0].id for node in cls.body if isinstance(node, ast.Assign)]


class TestEnumsBlock:
    """Test cases for the enums block"""

    def test_generates_enum_with_ordered_values(self, block_context, output_dir):
        metrics = EnumsBlockGenerator(block_context).generate()
        assert metrics.items_generated == 1
        source = (output_dir / "enums" / "Color.py").read_text()
        assert '@strawberry.enum(name="Color", description="Post accent color")' in source
        assert "class Color(enum.Enum):" in source
        assert class_body_names(source) == ["RED", "GREEN", "BLUE"]

    def test_barrel_and_metrics(self, barrel_exports, block_context, output_dir):
        metrics = EnumsBlockGenerator(block_context).generate()
        assert barrel_exports(output_dir / "enums" / "__init__.py") == ["Color"]
        root = block_context.options.output_dir
        assert metrics.written_paths == sorted([root / "enums" / "Color.py", root / "enums" / "__init__.py"])
        assert metrics.time_elapsed is not None

    def test_disabled_block_writes_nothing(self, make_config, blog_schema, output_dir):
        options = make_config(output_dir, emit_only=["models"]).resolve()
        context = BlockContext(normalize(blog_schema, options), options, TemplateRenderer(options), ImportResolver())
        metrics = RelationResolversBlockGenerator(context).generate()
        assert metrics.items_generated == 0
        assert metrics.time_elapsed is None
        assert not (output_dir / "resolvers").exists()


class TestModelsBlock:
    """Test cases for the models block"""

    def test_model_relations_are_private(self, block_context, output_dir):
        ModelsBlockGenerator(block_context).generate()
        source = (output_dir / "models" / "User.py").read_text()
        assert (
            'posts: strawberry.Private[typing.Optional[list[typing.Annotated["Post", strawberry.lazy(".Post")]]]] = None'
        ) in source
        assert "if typing.TYPE_CHECKING:\n    from .Post import Post" in source
        assert 'name: typing.Optional[str] = strawberry.field(name="name", default=None)' in source

    def test_model_imports(self, barrel_exports, block_context, output_dir):
        ModelsBlockGenerator(block_context).generate()
        source = (output_dir / "models" / "Post.py").read_text()
        assert "import datetime" in source
        assert "from ..enums.Color import Color" in source
        assert '@strawberry.type(name="Post", description="A blog post")' in source
        assert barrel_exports(output_dir / "models" / "__init__.py") == ["Post", "User"]

    def test_omitted_fields_not_rendered(self, make_config, blog_schema, output_dir):
        options = make_config(output_dir, omit_fields={"Post": ["createdAt"]}).resolve()
        context = BlockContext(normalize(blog_schema, options), options, TemplateRenderer(options), ImportResolver())
        ModelsBlockGenerator(context).generate()
        source = (output_dir / "models" / "Post.py").read_text()
        assert "createdAt" not in source
        assert "import datetime" not in source

    def test_output_field_default_omission(self, make_config, blog_schema, output_dir):
        options = make_config(output_dir, omit_output_fields_by_default=["name"]).resolve()
        context = BlockContext(normalize(blog_schema, options), options, TemplateRenderer(options), ImportResolver())
        ModelsBlockGenerator(context).generate()
        source = (output_dir / "models" / "User.py").read_text()
        assert "name:" not in source
        assert "id: int" in source

    def test_remapped_field_accessors(self, make_config, blog_schema, output_dir):
        options = make_config(output_dir, field_name_overrides={"User": {"name": "displayName"}}).resolve()
        context = BlockContext(normalize(blog_schema, options), options, TemplateRenderer(options), ImportResolver())
        ModelsBlockGenerator(context).generate()
        source = (output_dir / "models" / "User.py").read_text()
        assert 'name: typing.Optional[str] = strawberry.field(name="displayName", default=None)' in source
        assert "    @property\n    def displayName(self) -> typing.Optional[str]:\n        return self.name" in source
        assert "    @displayName.setter\n" in source

    def test_write_error_carries_block_and_path(self, block_context, output_dir):
        output_dir.mkdir(parents=True)
        (output_dir / "models").write_text("not a directory")
        with pytest.raises(OutputWriteError) as excinfo:
            ModelsBlockGenerator(block_context).generate()
        assert excinfo.value.stage == "models-generation"
        assert excinfo.value.path == block_context.options.output_dir / "models"


class TestInputsBlock:
    """Test cases for the inputs block"""

    def test_create_input(self, block_context, output_dir):
        InputsBlockGenerator(block_context).generate()
        source = (output_dir / "resolvers" / "inputs" / "PostCreateInput.py").read_text()
        assert '@strawberry.input(name="PostCreateInput")' in source
        assert 'content: str = strawberry.field(name="content")' in source
        assert 'color: Color = strawberry.field(name="color")' in source
        assert 'id: typing.Optional[str] = strawberry.field(name="id", default=strawberry.UNSET)' in source
        assert "from ...enums.Color import Color" in source
        assert (
            "if typing.TYPE_CHECKING:\n    from .UserCreateNestedOneWithoutPostsInput import UserCreateNestedOneWithoutPostsInput"
        ) in source
        assert (
            'author: typing.Annotated["UserCreateNestedOneWithoutPostsInput", '
            'strawberry.lazy(".UserCreateNestedOneWithoutPostsInput")] = strawberry.field(name="author")'
        ) in source

    def test_keyword_field(self, block_context, output_dir):
        InputsBlockGenerator(block_context).generate()
        source = (output_dir / "resolvers" / "inputs" / "StringNullableFilter.py").read_text()
        assert 'in_: typing.Optional[list[str]] = strawberry.field(name="in", default=strawberry.UNSET)' in source

    def test_barrel_lists_every_input(self, barrel_exports, block_context, document, output_dir):
        metrics = InputsBlockGenerator(block_context).generate()
        assert metrics.items_generated == len(document.input_types)
        assert barrel_exports(output_dir / "resolvers" / "inputs" / "__init__.py") == sorted(document.input_types)


class TestOutputsBlock:
    """Test cases for the outputs block"""

    def test_roots_and_models_not_emitted(self, block_context, output_dir):
        OutputsBlockGenerator(block_context).generate()
        outputs = output_dir / "resolvers" / "outputs"
        assert not (outputs / "Query.py").exists()
        assert not (outputs / "Mutation.py").exists()
        assert not (outputs / "User.py").exists()
        assert (outputs / "AggregateUser.py").exists()

    def test_args_accessor_and_args_type(self, block_context, output_dir):
        metrics = OutputsBlockGenerator(block_context).generate()
        assert metrics.items_generated == 5
        outputs = output_dir / "resolvers" / "outputs"
        source = (outputs / "UserCount.py").read_text()
        assert "posts: strawberry.Private[int]" in source
        assert '    @strawberry.field(name="posts")\n    def get_posts(self, args: UserCountPostsArgs) -> int:' in source
        assert "from .args.UserCountPostsArgs import UserCountPostsArgs" in source

        args_source = (outputs / "args" / "UserCountPostsArgs.py").read_text()
        assert '@strawberry.input(name="UserCountPostsArgs")' in args_source
        assert "if typing.TYPE_CHECKING:\n    from ...inputs.PostWhereInput import PostWhereInput" in args_source
        assert 'strawberry.lazy("...inputs.PostWhereInput")' in args_source

    def test_barrels(self, barrel_exports, block_context, output_dir):
        OutputsBlockGenerator(block_context).generate()
        outputs = output_dir / "resolvers" / "outputs"
        assert barrel_exports(outputs / "__init__.py") == [
            "AggregateUser",
            "UserCount",
            "UserCountAggregate",
            "UserCountPostsArgs",
            "UserMaxAggregate",
        ]
        assert barrel_exports(outputs / "args" / "__init__.py") == ["UserCountPostsArgs"]
        assert "from .args import UserCountPostsArgs" in (outputs / "__init__.py").read_text()


class TestCrudResolversBlock:
    """Test cases for the CRUD resolvers block"""

    def test_resolver_methods(self, block_context, output_dir):
        CrudResolversBlockGenerator(block_context).generate()
        source = (output_dir / "resolvers" / "crud" / "User" / "UserCrudResolver.py").read_text()
        assert "class UserCrudResolver:" in source
        assert (
            '    @strawberry.field(name="findUniqueUser")\n'
            "    async def find_unique_user(self, info: strawberry.Info, args: FindUniqueUserArgs) -> typing.Optional[User]:"
        ) in source
        assert 'client = get_client(info, "prisma")' in source
        assert "return await client.user.find_unique(**transform_args(args))" in source
        assert '    @strawberry.mutation(name="createOneUser")' in source
        assert "async def aggregate_user(self, info: strawberry.Info) -> AggregateUser:" in source
        assert "return await client.user.aggregate()" in source
        assert "from ....helpers import get_client" in source
        assert "from ....models.User import User" in source
        assert "from ...outputs.AggregateUser import AggregateUser" in source
        assert "from .args.FindUniqueUserArgs import FindUniqueUserArgs" in source

    def test_args_types(self, barrel_exports, block_context, output_dir):
        CrudResolversBlockGenerator(block_context).generate()
        args_dir = output_dir / "resolvers" / "crud" / "Post" / "args"
        source = (args_dir / "CreateOnePostArgs.py").read_text()
        assert (
            'data: typing.Annotated["PostCreateInput", strawberry.lazy("....inputs.PostCreateInput")]'
            ' = strawberry.field(name="data")'
        ) in source
        assert "    from ....inputs.PostCreateInput import PostCreateInput" in source
        assert barrel_exports(args_dir / "__init__.py") == ["CreateOnePostArgs", "DeleteOnePostArgs"]
        assert not (output_dir / "resolvers" / "crud" / "Post" / "args" / "FindManyPostArgs.py").exists()

    def test_barrel_exports_resolver_tuple(self, barrel_exports, block_context, output_dir):
        metrics = CrudResolversBlockGenerator(block_context).generate()
        assert metrics.items_generated == 7
        barrel = output_dir / "resolvers" / "crud" / "__init__.py"
        exports = barrel_exports(barrel)
        assert exports[-1] == "crud_resolvers"
        assert exports[:-1] == sorted(exports[:-1])
        assert "UserCrudResolver" in exports
        assert "crud_resolvers = (PostCrudResolver, UserCrudResolver)" in barrel.read_text()

    def test_custom_context_key(self, make_config, blog_schema, output_dir):
        options = make_config(output_dir, context_client_key="db").resolve()
        context = BlockContext(normalize(blog_schema, options), options, TemplateRenderer(options), ImportResolver())
        CrudResolversBlockGenerator(context).generate()
        source = (output_dir / "resolvers" / "crud" / "Post" / "PostCrudResolver.py").read_text()
        assert 'client = get_client(info, "db")' in source


class TestRelationResolversBlock:
    """Test cases for the relation resolvers block"""

    def test_list_relation(self, block_context, output_dir):
        RelationResolversBlockGenerator(block_context).generate()
        source = (output_dir / "resolvers" / "relations" / "User" / "UserRelationsResolver.py").read_text()
        assert (
            "    async def posts(self, root: strawberry.Parent[User], info: strawberry.Info, args: UserPostsArgs)"
            " -> list[Post]:"
        ) in source
        assert 'where={"id": root.id},' in source
        assert 'include={"posts": transform_args(args) or True},' in source
        assert "return []" in source
        assert "from .args.UserPostsArgs import UserPostsArgs" in source

    def test_single_relation_is_optional(self, block_context, output_dir):
        RelationResolversBlockGenerator(block_context).generate()
        source = (output_dir / "resolvers" / "relations" / "Post" / "PostRelationsResolver.py").read_text()
        assert "-> typing.Optional[User]:" in source
        assert 'include={"author": True},' in source
        assert "return None" in source
        assert "transform_args" not in source

    def test_barrel(self, barrel_exports, block_context, output_dir):
        metrics = RelationResolversBlockGenerator(block_context).generate()
        assert metrics.items_generated == 3
        barrel = output_dir / "resolvers" / "relations" / "__init__.py"
        assert barrel_exports(barrel) == ["PostRelationsResolver", "UserPostsArgs", "UserRelationsResolver", "relation_resolvers"]
        assert "relation_resolvers = (PostRelationsResolver, UserRelationsResolver)" in barrel.read_text()

    def test_where_expression_composite_key(self, document):
        user = document.models["User"]
        model = Model(
            name="AB",
            fields=user.fields,
            primary_key=("aId", "bId"),
            primary_key_name=None,
            relation_fields=(),
        )
        assert where_expression(model) == '{"aId_bId": {"aId": root.aId, "bId": root.bId}}'
        named = Model(name="AB", fields=(), primary_key=("aId", "bId"), primary_key_name="link", relation_fields=())
        assert where_expression(named) == '{"link": {"aId": root.aId, "bId": root.bId}}'

    def test_model_without_key_has_no_resolver(self, document):
        user = document.models["User"]
        keyless = Model(name="User", fields=user.fields, primary_key=(), primary_key_name=None, relation_fields=())
        assert resolved_relation_fields(keyless) == ()
        unique = Model(
            name="User",
            fields=user.fields,
            primary_key=(),
            primary_key_name=None,
            relation_fields=(),
            unique_fields=(("email",),),
        )
        assert [f.name for f in resolved_relation_fields(unique)] == ["posts"]


class TestAuxiliaryFiles:
    """Test cases for the staged auxiliary files"""

    def build(self, document, options):
        renderer = TemplateRenderer(options)
        return {str(f.path): f.content for f in AuxiliaryFilesBuilder(document, options, renderer, ImportResolver()).build({"models": []})}

    def test_staged_files(self, document, options):
        files = self.build(document, options)
        assert sorted(files) == ["__init__.py", "enhance.py", "helpers.py", "resolvers/__init__.py", "scalars.py"]
        assert "resolvers = (*crud_resolvers, *relation_resolvers)" in files["__init__.py"]
        assert "from .resolvers.crud import crud_resolvers" in files["__init__.py"]
        assert "from .relations import *  # noqa: F401, F403" in files["resolvers/__init__.py"]

    def test_enhance_map(self, document, options):
        enhance = self.build(document, options)["enhance.py"]
        assert '    "User": UserCrudResolver,' in enhance
        assert '        "findUnique": "findUniqueUser",' in enhance
        assert '    "User": ("posts",),' in enhance
        assert "RELATION_MODELS: tuple[str, ...] = ()" in enhance
        assert '    "FindManyUserArgs": ("where", "take"),' in enhance
        assert "from .resolvers.crud import PostCrudResolver" in enhance
        assert "from strawberry.extensions import FieldExtension" in enhance

    def test_schema_ir_copy(self, make_config, document, output_dir):
        options = make_config(output_dir, emit_schema_ir=True).resolve()
        files = self.build(document, options)
        assert files["schema_ir.json"] == '{\n  "models": []\n}\n'

    def test_disabled_resolvers(self, make_config, blog_schema, output_dir):
        options = make_config(output_dir, emit_only=["models"]).resolve()
        files = self.build(normalize(blog_schema, options), options)
        assert "resolvers/__init__.py" not in files
        assert "crud_resolvers: tuple[type, ...] = ()" in files["__init__.py"]
        assert "from .models import *  # noqa: F401, F403" in files["__init__.py"]
        assert "from .resolvers" not in files["__init__.py"]
        assert "CrudResolver" not in files["enhance.py"]

    def test_client_import_path(self, make_config, document, output_dir):
        options = make_config(output_dir, custom_client_import_path="app.db").resolve()
        helpers = self.build(document, options)["helpers.py"]
        assert "    from app.db import Prisma" in helpers


if __name__ == "__main__":
    pytest.main([__file__])
