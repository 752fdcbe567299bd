#!/usr/bin/env python3

import pytest

from datamodel_to_graphql.pipeline.imports import (
    ImportEntry,
    ImportResolver,
    crud_args_module,
    crud_resolver_module,
    output_args_module,
    relative_module,
    type_module,
)
from datamodel_to_graphql.pipeline.normalizer import DocumentField, FieldKind, TypeDescriptor, TypeLocation


def make_field(name, location, type_name, *, is_list=False, args_type_name=None, kind=None, is_omitted=False):
    if kind is None:
        kind = {
            TypeLocation.SCALAR: FieldKind.SCALAR,
            TypeLocation.ENUM_TYPES: FieldKind.ENUM,
            TypeLocation.MODEL_TYPES: FieldKind.RELATION,
        }.get(location, FieldKind.OBJECT)
    return DocumentField(
        name=name,
        exposed_name=name,
        kind=kind,
        target=TypeDescriptor(location, type_name, is_list),
        is_nullable=False,
        is_omitted=is_omitted,
        args_type_name=args_type_name,
    )


class TestRelativeModule:
    """Test cases for relative import computation"""

    def test_same_package(self):
        assert relative_module(("resolvers", "inputs", "A"), ("resolvers", "inputs", "B")) == ".B"

    def test_sibling_package(self):
        assert relative_module(("models", "Post"), ("enums", "Color")) == "..enums.Color"

    def test_nested_to_root(self):
        assert relative_module(crud_resolver_module("User"), ("helpers",)) == "....helpers"

    def test_nested_to_subpackage(self):
        module = crud_resolver_module("User")
        assert relative_module(module, crud_args_module("User", "FindManyUserArgs")) == ".args.FindManyUserArgs"

    def test_root_module(self):
        assert relative_module(("enhance",), ("resolvers", "crud")) == ".resolvers.crud"

    def test_type_module_of_scalar_raises(self):
        with pytest.raises(ValueError):
            type_module(TypeLocation.SCALAR, "Int")


class TestImportResolver:
    """Test cases for import set computation"""

    def setup_method(self):
        self.resolver = ImportResolver()
        self.module = type_module(TypeLocation.INPUT_OBJECT_TYPES, "PostCreateInput")

    def test_framework_imports_always_present(self):
        import_set = self.resolver.resolve(self.module, "PostCreateInput", [])
        assert import_set.framework == (ImportEntry("strawberry"), ImportEntry("typing"))
        assert import_set.generated == ()

    def test_scalar_imports(self):
        fields = [
            make_field("createdAt", TypeLocation.SCALAR, "DateTime"),
            make_field("meta", TypeLocation.SCALAR, "Json"),
            make_field("price", TypeLocation.SCALAR, "Decimal"),
            make_field("count", TypeLocation.SCALAR, "Int"),
        ]
        import_set = self.resolver.resolve(self.module, "PostCreateInput", fields)
        assert ImportEntry("datetime") in import_set.framework
        assert ImportEntry("strawberry.scalars", "JSON") in import_set.framework
        assert import_set.custom_scalars == (ImportEntry("...scalars", "DecimalScalar"),)

    def test_categories(self):
        fields = [
            make_field("color", TypeLocation.ENUM_TYPES, "Color"),
            make_field("author", TypeLocation.INPUT_OBJECT_TYPES, "UserCreateNestedOneWithoutPostsInput"),
            make_field("posts", TypeLocation.OUTPUT_OBJECT_TYPES, "UserCount", args_type_name="UserCountPostsArgs"),
        ]
        import_set = self.resolver.resolve(self.module, "PostCreateInput", fields)
        assert import_set.enums == (ImportEntry("...enums.Color", "Color"),)
        assert import_set.generated == (
            ImportEntry("..outputs.UserCount", "UserCount"),
            ImportEntry("..outputs.args.UserCountPostsArgs", "UserCountPostsArgs"),
            ImportEntry(".UserCreateNestedOneWithoutPostsInput", "UserCreateNestedOneWithoutPostsInput"),
        )

    def test_self_import_excluded(self):
        fields = [make_field("AND", TypeLocation.INPUT_OBJECT_TYPES, "PostWhereInput", is_list=True)]
        import_set = self.resolver.resolve(self.module, "PostWhereInput", fields)
        assert import_set.generated == ()

    def test_deduplicated_and_sorted(self):
        fields = [
            make_field("b", TypeLocation.INPUT_OBJECT_TYPES, "BInput"),
            make_field("a", TypeLocation.INPUT_OBJECT_TYPES, "AInput"),
            make_field("b2", TypeLocation.INPUT_OBJECT_TYPES, "BInput"),
        ]
        import_set = self.resolver.resolve(self.module, "X", fields)
        assert [e.name for e in import_set.generated] == ["AInput", "BInput"]

    def test_deterministic(self):
        fields = [
            make_field("color", TypeLocation.ENUM_TYPES, "Color"),
            make_field("createdAt", TypeLocation.SCALAR, "DateTime"),
            make_field("author", TypeLocation.INPUT_OBJECT_TYPES, "UserWhereInput"),
        ]
        first = self.resolver.resolve(self.module, "X", fields).render()
        second = self.resolver.resolve(self.module, "X", list(reversed(fields))).render()
        assert first == second

    def test_private_relations_go_under_type_checking(self):
        module = type_module(TypeLocation.MODEL_TYPES, "User")
        fields = [make_field("posts", TypeLocation.MODEL_TYPES, "Post", is_list=True, args_type_name="UserPostsArgs")]
        import_set = self.resolver.resolve(module, "User", fields, relation_fields_are_private=True, lazy_references=True)
        assert import_set.type_checking == (ImportEntry(".Post", "Post"),)
        # Private relation storage takes no args accessor
        assert import_set.generated == ()
        rendered = import_set.render()
        assert "if typing.TYPE_CHECKING:\n    from .Post import Post" in rendered

    def test_lazy_references_keep_enums_and_args_at_runtime(self):
        fields = [
            make_field("color", TypeLocation.ENUM_TYPES, "Color"),
            make_field("author", TypeLocation.INPUT_OBJECT_TYPES, "UserCreateNestedOneWithoutPostsInput"),
            make_field("posts", TypeLocation.OUTPUT_OBJECT_TYPES, "UserCount", args_type_name="UserCountPostsArgs"),
        ]
        import_set = self.resolver.resolve(self.module, "PostCreateInput", fields, lazy_references=True)
        assert import_set.enums == (ImportEntry("...enums.Color", "Color"),)
        assert import_set.generated == (ImportEntry("..outputs.args.UserCountPostsArgs", "UserCountPostsArgs"),)
        assert import_set.type_checking == (
            ImportEntry("..outputs.UserCount", "UserCount"),
            ImportEntry(".UserCreateNestedOneWithoutPostsInput", "UserCreateNestedOneWithoutPostsInput"),
        )
        rendered = import_set.render()
        assert rendered.endswith(
            "if typing.TYPE_CHECKING:\n"
            "    from ..outputs.UserCount import UserCount\n"
            "    from .UserCreateNestedOneWithoutPostsInput import UserCreateNestedOneWithoutPostsInput"
        )

    def test_args_module_is_configurable(self):
        module = crud_resolver_module("User")
        fields = [make_field("findManyUser", TypeLocation.MODEL_TYPES, "User", is_list=True, args_type_name="FindManyUserArgs")]
        import_set = self.resolver.resolve(
            module,
            "UserCrudResolver",
            fields,
            args_module=lambda name: crud_args_module("User", name),
        )
        assert ImportEntry(".args.FindManyUserArgs", "FindManyUserArgs") in import_set.generated
        assert ImportEntry("....models.User", "User") in import_set.generated

    def test_default_args_module(self):
        assert output_args_module("XArgs") == ("resolvers", "outputs", "args", "XArgs")

    def test_render_sections(self):
        fields = [
            make_field("color", TypeLocation.ENUM_TYPES, "Color"),
            make_field("createdAt", TypeLocation.SCALAR, "DateTime"),
        ]
        rendered = self.resolver.resolve(self.module, "X", fields).render()
        assert rendered == "\n".join(
            [
                "from __future__ import annotations",
                "",
                "import datetime",
                "import typing",
                "",
                "import strawberry",
                "",
                "from ...enums.Color import Color",
            ]
        )

    def test_extra_imports(self):
        extra = [ImportEntry("....helpers", "get_client")]
        import_set = self.resolver.resolve(crud_resolver_module("User"), "UserCrudResolver", [], extra=extra)
        assert import_set.generated == (ImportEntry("....helpers", "get_client"),)
        assert import_set.imported_names() == ["get_client"]


if __name__ == "__main__":
    pytest.main([__file__])
