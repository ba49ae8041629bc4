"""
Unit tests for type closure resolution and enum registration.
"""

from dataclasses import replace

import pytest

from prisma_graphql_gen.api.builders import (
    enum_declaration_exists,
    materialize_operations,
    register_enums,
    render_enum,
    resolve_types,
)
from prisma_graphql_gen.api.builders.type_closure import TypeDeclaration, TypeField
from prisma_graphql_gen.api.crud_helpers import MUTATION_KINDS, OPERATION_KINDS
from prisma_graphql_gen.datamodel import ENUM_TYPES, INPUT_OBJECT_TYPES, OUTPUT_OBJECT_TYPES, data_model_from_dict
from prisma_graphql_gen.plugins import HookName, Plugin, PluginManager


def resolve(data_model, entity_name="Employee", queries=(), mutations=(), plugins=None):
    operations = materialize_operations(entity_name, list(queries), list(mutations), data_model)
    return resolve_types(data_model.get_entity(entity_name), operations.all, data_model, plugins=plugins)


class TestDeclarations:
    """Test SDL rendering of declarations."""

    def test_input_declaration(self):
        declaration = TypeDeclaration(name="EnumRoleFilter", variant="input", fields=[
            TypeField(name="equals", type_name="Role", location=ENUM_TYPES),
            TypeField(name="in", type_name="Role", location=ENUM_TYPES, is_list=True),
        ])
        assert declaration.to_sdl() == "input EnumRoleFilter {\n  equals: Role\n  in: [Role!]\n}"

    def test_output_declaration(self):
        declaration = TypeDeclaration(name="AffectedRowsOutput", variant="output", fields=[
            TypeField(name="count", type_name="Int", is_required=True),
        ])
        assert declaration.to_sdl() == "type AffectedRowsOutput {\n  count: Int!\n}"

    def test_declaration_without_fields(self):
        assert TypeDeclaration(name="Empty", variant="input").to_sdl() == "input Empty"


class TestResolveTypes:
    """Test resolve_types() against the fixture catalog."""

    def test_find_many_closure(self, data_model):
        types = resolve(data_model, queries=["findMany"])
        assert set(types.names("input")) == {
            "EmployeeWhereInput",
            "EmployeeOrderByWithRelationInput",
            "EmployeeWhereUniqueInput",
            "EnumRoleFilter",
            "CompanyRelationFilter",
            "CompanyWhereInput",
            "EmployeeListRelationFilter",
            "CompanyOrderByWithRelationInput",
        }
        assert set(types.names("output")) == {"Employee", "Company", "CompanyCountOutputType"}
        assert set(types.enums) == {"Role", "SortOrder", "EmployeeScalarFieldEnum"}

    def test_cyclic_types_declared_once(self, data_model):
        """EmployeeWhereInput references itself directly and through Company filters."""
        types = resolve(data_model, queries=["findMany", "findFirst"])
        names = types.names("input")
        assert names.count("EmployeeWhereInput") == 1
        assert len(names) == len(set(names))

        where = next(d for d in types.inputs if d.name == "EmployeeWhereInput")
        and_field = next(f for f in where.fields if f.name == "AND")
        assert and_field.sdl_type() == "EmployeeWhereInput"

    def test_closure_is_complete(self, data_model):
        """Every object type a declaration references is declared; every enum is collected."""
        types = resolve(data_model, queries=["findMany", "aggregate"], mutations=["create", "upsert"])
        inputs, outputs = set(types.names("input")), set(types.names("output"))

        for declaration in (*types.inputs, *types.outputs):
            for field in declaration.fields:
                if field.location == INPUT_OBJECT_TYPES:
                    assert field.type_name in inputs, f"{declaration.name}.{field.name}"
                elif field.location == OUTPUT_OBJECT_TYPES:
                    assert field.type_name in outputs, f"{declaration.name}.{field.name}"
                elif field.location == ENUM_TYPES:
                    assert field.type_name in types.enums, f"{declaration.name}.{field.name}"

    def test_preferred_field_types(self, data_model):
        types = resolve(data_model, mutations=["create"])
        create = next(d for d in types.inputs if d.name == "EmployeeCreateInput")
        assert [f.to_sdl() for f in create.fields] == [
            "name: String!",
            "email: String!",
            "role: Role",
            "tags: [String!]",
            "company: CompanyCreateNestedOneWithoutEmployeesInput!",
        ]

    def test_output_field_nullability(self, data_model):
        types = resolve(data_model, queries=["findUnique"])
        employee = next(d for d in types.outputs if d.name == "Employee")
        sdl = {f.name: f.sdl_type() for f in employee.fields}
        assert sdl["salary"] == "Float"
        assert sdl["tags"] == "[String!]!"
        assert sdl["company"] == "Company!"

    def test_grouping_carried(self, data_model):
        types = resolve(data_model, queries=["findMany"])
        where = next(d for d in types.inputs if d.name == "EmployeeWhereInput")
        assert where.grouping == "Employee"

    def test_static_input_types_seeded(self, data_model):
        """Per-kind input types are declared along with everything they reference."""
        types = resolve(data_model, mutations=["update"])
        assert {"EmployeeWhereUniqueInput", "EmployeeUpdateInput", "CompanyWhereUniqueInput"} <= set(
            types.names("input")
        )

    def test_types_missing_from_catalog_skipped(self, dmmf_dict):
        inputs = dmmf_dict["schema"]["inputObjectTypes"]["prisma"]
        inputs[:] = [t for t in inputs if t["name"] != "CompanyOrderByWithRelationInput"]

        types = resolve(data_model_from_dict(dmmf_dict), queries=["findMany"])
        assert "CompanyOrderByWithRelationInput" not in types.names("input")
        assert "EmployeeOrderByWithRelationInput" in types.names("input")

    def test_entity_enum_fields_collected(self, data_model):
        """Enums of the entity's own fields are needed even when no operation uses them."""
        types = resolve(data_model, mutations=["createMany"])
        assert "Role" in types.enums

    def test_deterministic(self, data_model):
        first = resolve(data_model, queries=["findMany", "findUnique"], mutations=["update"])
        second = resolve(data_model, queries=["findMany", "findUnique"], mutations=["update"])
        assert first == second

    def test_without_output(self, data_model):
        types = resolve(data_model, queries=["findMany"])
        assert "Employee" not in types.without_output("Employee").names("output")
        assert "Employee" in types.names("output")

    def test_plugin_can_drop_field(self, data_model):
        manager = PluginManager()
        manager.register(Plugin(name="drop-email", hooks={
            HookName.ON_PREPARED_TYPE_FIELD: lambda payload, config: (
                replace(payload, include=False) if payload.field.name == "email" else None
            ),
        }))
        types = resolve(data_model, queries=["findUnique"], plugins=manager)
        unique = next(d for d in types.inputs if d.name == "EmployeeWhereUniqueInput")
        assert [f.name for f in unique.fields] == ["id"]

    def test_plugin_can_replace_declaration(self, data_model):
        manager = PluginManager()
        manager.register(Plugin(name="rename", hooks={
            HookName.ON_PREPARED_TYPE: lambda payload, config: (
                replace(payload, declaration=replace(payload.declaration, grouping="custom"))
            ),
        }))
        types = resolve(data_model, queries=["findUnique"], plugins=manager)
        assert {d.grouping for d in types.inputs} == {"custom"}


class TestEnums:
    """Test enum rendering and registration in the base schema."""

    def test_render_enum(self, data_model):
        assert render_enum(data_model.get_enum("Role")) == "enum Role {\n  ADMIN\n  USER\n}\n"

    def test_declaration_exists_matches_whole_word(self):
        content = "enum RoleType {\n  A\n}\n"
        assert enum_declaration_exists(content, "RoleType")
        assert not enum_declaration_exists(content, "Role")

    def test_register_creates_file(self, data_model, base_graphql):
        added = register_enums(["Role", "SortOrder"], data_model, base_graphql)
        assert added == ["Role", "SortOrder"]
        assert base_graphql.read_text() == (
            "enum Role {\n  ADMIN\n  USER\n}\n\nenum SortOrder {\n  asc\n  desc\n}\n"
        )

    def test_register_is_idempotent(self, data_model, base_graphql):
        register_enums(["Role", "SortOrder"], data_model, base_graphql)
        before = base_graphql.read_text()

        assert register_enums(["SortOrder", "Role"], data_model, base_graphql) == []
        assert base_graphql.read_text() == before

    def test_register_appends_to_existing(self, data_model, base_graphql):
        base_graphql.parent.mkdir(parents=True)
        base_graphql.write_text("scalar DateTime\n\nenum Role {\n  ADMIN\n}\n")

        assert register_enums(["Role", "SortOrder"], data_model, base_graphql) == ["SortOrder"]
        content = base_graphql.read_text()
        assert content.startswith("scalar DateTime\n\nenum Role {\n  ADMIN\n}\n\nenum SortOrder {")
        assert content.count("enum Role") == 1

    def test_unknown_enum_skipped(self, data_model, base_graphql):
        assert register_enums(["Mood"], data_model, base_graphql) == []
        assert not base_graphql.exists()

    def test_single_write_through_callback(self, data_model, base_graphql):
        writes = []
        register_enums(["Role", "SortOrder"], data_model, base_graphql,
                       write=lambda path, content: writes.append((path, content)))
        assert len(writes) == 1
        assert writes[0][0] == str(base_graphql)


@pytest.mark.parametrize("kind", OPERATION_KINDS)
def test_every_operation_closure_has_unique_names(data_model, kind):
    if kind in MUTATION_KINDS:
        types = resolve(data_model, mutations=[kind])
    else:
        types = resolve(data_model, queries=[kind])
    for variant in ("input", "output"):
        names = types.names(variant)
        assert len(names) == len(set(names))
