"""
Pytest configuration and shared fixtures for the generator test suite.

The DMMF fixture is a trimmed-down document in the shape `prisma generate`
hands to generators: four models (Employee, Company, Category, Person), one
model enum and the input/output catalog behind every operation kind on
Employee, including the self-referencing filter types that make the closure
cyclic. Category lacks a count operation, which the error tests rely on.
"""

import copy
import json
import logging
import shutil
import tempfile
from pathlib import Path

import pytest

from graphql import build_ast_schema, parse

from prisma_graphql_gen.config import Settings
from prisma_graphql_gen.datamodel import data_model_from_dict
from prisma_graphql_gen.request import GenerationRequest


# ---------------------------------------------------------------------- #
# DMMF building blocks
# ---------------------------------------------------------------------- #
def scalar(type_name, is_list=False):
    return {"type": type_name, "location": "scalar", "isList": is_list}


def null():
    return scalar("Null")


def input_ref(type_name, is_list=False, namespace="prisma"):
    return {"type": type_name, "location": "inputObjectTypes", "namespace": namespace, "isList": is_list}


def enum_ref(type_name, is_list=False, namespace="prisma"):
    return {"type": type_name, "location": "enumTypes", "namespace": namespace, "isList": is_list}


def output_ref(type_name, is_list=False, namespace="model"):
    return {"type": type_name, "location": "outputObjectTypes", "namespace": namespace, "isList": is_list}


def arg(name, *input_types, required=False, nullable=False):
    return {
        "name": name,
        "isRequired": required,
        "isNullable": nullable,
        "inputTypes": list(input_types),
    }


def out_field(name, output_type, nullable=False, args=()):
    return {"name": name, "isNullable": nullable, "outputType": output_type, "args": list(args)}


def model_field(name, type_name, kind="scalar", required=True, is_list=False, doc=None, **flags):
    field = {
        "name": name,
        "kind": kind,
        "type": type_name,
        "isList": is_list,
        "isRequired": required,
        "isId": flags.get("is_id", False),
        "isUnique": flags.get("is_unique", False),
    }
    if doc is not None:
        field["documentation"] = doc
    return field


def _find_many_args(model):
    return [
        arg("where", input_ref(f"{model}WhereInput")),
        arg("orderBy",
            input_ref(f"{model}OrderByWithRelationInput", is_list=True),
            input_ref(f"{model}OrderByWithRelationInput")),
        arg("cursor", input_ref(f"{model}WhereUniqueInput")),
        arg("take", scalar("Int")),
        arg("skip", scalar("Int")),
        arg("distinct",
            enum_ref(f"{model}ScalarFieldEnum", is_list=True),
            enum_ref(f"{model}ScalarFieldEnum")),
    ]


def build_dmmf():
    """A fresh DMMF document as a plain dict."""
    models = [
        {
            "name": "Employee",
            "fields": [
                model_field("id", "Int", is_id=True),
                model_field("name", "String"),
                model_field("email", "String", is_unique=True),
                model_field("role", "Role", kind="enum"),
                model_field("salary", "Float", required=False),
                model_field("bio", "String", required=False, doc="Markdown text. @gqlType Markdown"),
                model_field("password", "String", doc="Hashed. @gqlIgnore"),
                model_field("tags", "String", is_list=True, doc="@gqlNonNullElement"),
                model_field("companyId", "Int"),
                model_field("company", "Company", kind="object"),
            ],
        },
        {
            "name": "Company",
            "fields": [
                model_field("id", "Int", is_id=True),
                model_field("name", "String"),
                model_field("employees", "Employee", kind="object", is_list=True),
            ],
        },
        {
            "name": "Category",
            "fields": [
                model_field("id", "Int", is_id=True),
                model_field("name", "String"),
            ],
        },
        {
            "name": "Person",
            "fields": [
                model_field("id", "Int", is_id=True),
                model_field("name", "String"),
            ],
        },
    ]

    input_types = [
        {"name": "EmployeeWhereInput", "meta": {"grouping": "Employee"}, "fields": [
            arg("AND", input_ref("EmployeeWhereInput"), input_ref("EmployeeWhereInput", is_list=True)),
            arg("id", input_ref("IntFilter"), scalar("Int")),
            arg("name", input_ref("StringFilter"), scalar("String")),
            arg("role", input_ref("EnumRoleFilter"), enum_ref("Role", namespace="model")),
            arg("company", input_ref("CompanyRelationFilter"), input_ref("CompanyWhereInput"), null(),
                nullable=True),
        ]},
        {"name": "EmployeeWhereUniqueInput", "fields": [
            arg("id", scalar("Int")),
            arg("email", scalar("String")),
        ]},
        {"name": "EmployeeOrderByWithRelationInput", "fields": [
            arg("id", enum_ref("SortOrder")),
            arg("name", enum_ref("SortOrder")),
            arg("company", input_ref("CompanyOrderByWithRelationInput")),
        ]},
        {"name": "EmployeeCreateInput", "fields": [
            arg("name", scalar("String"), required=True),
            arg("email", scalar("String"), required=True),
            arg("role", enum_ref("Role", namespace="model")),
            arg("tags", input_ref("EmployeeCreatetagsInput"), scalar("String", is_list=True)),
            arg("company", input_ref("CompanyCreateNestedOneWithoutEmployeesInput"), required=True),
        ]},
        {"name": "EmployeeUpdateInput", "fields": [
            arg("name", scalar("String"), input_ref("StringFieldUpdateOperationsInput")),
            arg("role", enum_ref("Role", namespace="model"), input_ref("EnumRoleFieldUpdateOperationsInput")),
            arg("company", input_ref("CompanyUpdateOneRequiredWithoutEmployeesNestedInput")),
        ]},
        {"name": "EmployeeCreateManyInput", "fields": [
            arg("name", scalar("String"), required=True),
            arg("email", scalar("String"), required=True),
            arg("companyId", scalar("Int"), required=True),
        ]},
        {"name": "EmployeeUpdateManyMutationInput", "fields": [
            arg("name", scalar("String"), input_ref("StringFieldUpdateOperationsInput")),
            arg("salary", scalar("Float"), input_ref("NullableFloatFieldUpdateOperationsInput"), null(),
                nullable=True),
            arg("role", enum_ref("Role", namespace="model"), input_ref("EnumRoleFieldUpdateOperationsInput")),
        ]},
        {"name": "EmployeeOrderByWithAggregationInput", "fields": [
            arg("id", enum_ref("SortOrder")),
            arg("name", enum_ref("SortOrder")),
            arg("role", enum_ref("SortOrder")),
        ]},
        {"name": "EmployeeScalarWhereWithAggregatesInput", "fields": [
            arg("AND",
                input_ref("EmployeeScalarWhereWithAggregatesInput"),
                input_ref("EmployeeScalarWhereWithAggregatesInput", is_list=True)),
            arg("id", input_ref("IntWithAggregatesFilter"), scalar("Int")),
            arg("role", enum_ref("Role", namespace="model"), input_ref("EnumRoleWithAggregatesFilter")),
        ]},
        {"name": "EnumRoleFilter", "fields": [
            arg("equals", enum_ref("Role", namespace="model")),
            arg("in", enum_ref("Role", is_list=True, namespace="model")),
            arg("not", enum_ref("Role", namespace="model"), input_ref("NestedEnumRoleFilter")),
        ]},
        {"name": "CompanyRelationFilter", "fields": [
            arg("is", input_ref("CompanyWhereInput"), null(), nullable=True),
            arg("isNot", input_ref("CompanyWhereInput"), null(), nullable=True),
        ]},
        {"name": "CompanyWhereInput", "fields": [
            arg("id", input_ref("IntFilter"), scalar("Int")),
            arg("name", input_ref("StringFilter"), scalar("String")),
            arg("employees", input_ref("EmployeeListRelationFilter")),
        ]},
        {"name": "EmployeeListRelationFilter", "fields": [
            arg("every", input_ref("EmployeeWhereInput")),
            arg("some", input_ref("EmployeeWhereInput")),
            arg("none", input_ref("EmployeeWhereInput")),
        ]},
        {"name": "CompanyOrderByWithRelationInput", "fields": [
            arg("id", enum_ref("SortOrder")),
            arg("name", enum_ref("SortOrder")),
        ]},
        {"name": "CompanyWhereUniqueInput", "fields": [
            arg("id", scalar("Int")),
        ]},
        {"name": "CompanyCreateNestedOneWithoutEmployeesInput", "fields": [
            arg("connect", input_ref("CompanyWhereUniqueInput")),
        ]},
        {"name": "CompanyUpdateOneRequiredWithoutEmployeesNestedInput", "fields": [
            arg("connect", input_ref("CompanyWhereUniqueInput")),
        ]},
        {"name": "CategoryWhereInput", "fields": [
            arg("id", input_ref("IntFilter"), scalar("Int")),
            arg("name", input_ref("StringFilter"), scalar("String")),
        ]},
        {"name": "CategoryWhereUniqueInput", "fields": [
            arg("id", scalar("Int")),
        ]},
        {"name": "CategoryOrderByWithRelationInput", "fields": [
            arg("id", enum_ref("SortOrder")),
            arg("name", enum_ref("SortOrder")),
        ]},
        {"name": "CategoryCreateInput", "fields": [
            arg("name", scalar("String"), required=True),
        ]},
        {"name": "PersonCreateManyInput", "fields": [
            arg("name", scalar("String"), required=True),
        ]},
    ]

    model_outputs = [
        {"name": "Employee", "fields": [
            out_field("id", scalar("Int")),
            out_field("name", scalar("String")),
            out_field("email", scalar("String")),
            out_field("role", enum_ref("Role", namespace="model")),
            out_field("salary", scalar("Float"), nullable=True),
            out_field("bio", scalar("String"), nullable=True),
            out_field("tags", scalar("String", is_list=True)),
            out_field("companyId", scalar("Int")),
            out_field("company", output_ref("Company")),
        ]},
        {"name": "Company", "fields": [
            out_field("id", scalar("Int")),
            out_field("name", scalar("String")),
            out_field("employees", output_ref("Employee", is_list=True)),
            out_field("_count", output_ref("CompanyCountOutputType", namespace="prisma")),
        ]},
        {"name": "Category", "fields": [
            out_field("id", scalar("Int")),
            out_field("name", scalar("String")),
        ]},
        {"name": "Person", "fields": [
            out_field("id", scalar("Int")),
            out_field("name", scalar("String")),
        ]},
    ]

    query_fields = [
        out_field("findUniqueEmployee", output_ref("Employee"), nullable=True, args=[
            arg("where", input_ref("EmployeeWhereUniqueInput"), required=True),
        ]),
        out_field("findFirstEmployee", output_ref("Employee"), nullable=True,
                  args=_find_many_args("Employee")),
        out_field("findManyEmployee", output_ref("Employee", is_list=True),
                  args=_find_many_args("Employee")),
        out_field("aggregateEmployee", output_ref("AggregateEmployee", namespace="prisma"), args=[
            arg("where", input_ref("EmployeeWhereInput")),
        ]),
        out_field("countEmployee", scalar("Int"), args=[
            arg("where", input_ref("EmployeeWhereInput")),
        ]),
        out_field("groupByEmployee", output_ref("EmployeeGroupByOutputType", is_list=True, namespace="prisma"),
                  args=[
                      arg("where", input_ref("EmployeeWhereInput")),
                      arg("orderBy",
                          input_ref("EmployeeOrderByWithAggregationInput", is_list=True),
                          input_ref("EmployeeOrderByWithAggregationInput")),
                      arg("by",
                          enum_ref("EmployeeScalarFieldEnum", is_list=True),
                          enum_ref("EmployeeScalarFieldEnum"),
                          required=True),
                      arg("having", input_ref("EmployeeScalarWhereWithAggregatesInput")),
                      arg("take", scalar("Int")),
                      arg("skip", scalar("Int")),
                  ]),
        out_field("findUniqueCategory", output_ref("Category"), nullable=True, args=[
            arg("where", input_ref("CategoryWhereUniqueInput"), required=True),
        ]),
        out_field("findManyCategory", output_ref("Category", is_list=True), args=[
            arg("where", input_ref("CategoryWhereInput")),
            arg("orderBy", input_ref("CategoryOrderByWithRelationInput", is_list=True)),
            arg("take", scalar("Int")),
        ]),
        out_field("findManyPerson", output_ref("Person", is_list=True)),
    ]

    mutation_fields = [
        out_field("createOneEmployee", output_ref("Employee"), args=[
            arg("data", input_ref("EmployeeCreateInput"), input_ref("EmployeeUncheckedCreateInput"),
                required=True),
        ]),
        out_field("updateOneEmployee", output_ref("Employee"), nullable=True, args=[
            arg("data", input_ref("EmployeeUpdateInput"), required=True),
            arg("where", input_ref("EmployeeWhereUniqueInput"), required=True),
        ]),
        out_field("upsertOneEmployee", output_ref("Employee"), args=[
            arg("where", input_ref("EmployeeWhereUniqueInput"), required=True),
            arg("create", input_ref("EmployeeCreateInput"), required=True),
            arg("update", input_ref("EmployeeUpdateInput"), required=True),
        ]),
        out_field("deleteOneEmployee", output_ref("Employee"), nullable=True, args=[
            arg("where", input_ref("EmployeeWhereUniqueInput"), required=True),
        ]),
        out_field("createManyEmployee", output_ref("AffectedRowsOutput", namespace="prisma"), args=[
            arg("data",
                input_ref("EmployeeCreateManyInput"),
                input_ref("EmployeeCreateManyInput", is_list=True),
                required=True),
            arg("skipDuplicates", scalar("Boolean")),
        ]),
        out_field("updateManyEmployee", output_ref("AffectedRowsOutput", namespace="prisma"), args=[
            arg("data", input_ref("EmployeeUpdateManyMutationInput"), required=True),
            arg("where", input_ref("EmployeeWhereInput")),
        ]),
        out_field("deleteManyEmployee", output_ref("AffectedRowsOutput", namespace="prisma"), args=[
            arg("where", input_ref("EmployeeWhereInput")),
        ]),
        out_field("createOneCategory", output_ref("Category"), args=[
            arg("data", input_ref("CategoryCreateInput"), required=True),
        ]),
        out_field("createManyPerson", output_ref("AffectedRowsOutput", namespace="prisma"), args=[
            arg("data", input_ref("PersonCreateManyInput", is_list=True), required=True),
        ]),
    ]

    prisma_outputs = [
        {"name": "Query", "fields": query_fields},
        {"name": "Mutation", "fields": mutation_fields},
        {"name": "AffectedRowsOutput", "fields": [out_field("count", scalar("Int"))]},
        {"name": "CompanyCountOutputType", "fields": [out_field("employees", scalar("Int"))]},
        {"name": "AggregateEmployee", "fields": [
            out_field("_count", output_ref("EmployeeCountAggregateOutputType", namespace="prisma"),
                      nullable=True),
        ]},
        {"name": "EmployeeGroupByOutputType", "fields": [
            out_field("id", scalar("Int")),
            out_field("name", scalar("String")),
            out_field("role", enum_ref("Role", namespace="model")),
            out_field("_count", output_ref("EmployeeCountAggregateOutputType", namespace="prisma"),
                      nullable=True),
        ]},
        {"name": "EmployeeCountAggregateOutputType", "fields": [
            out_field("id", scalar("Int")),
            out_field("_all", scalar("Int")),
        ]},
    ]

    return {
        "datamodel": {
            "models": models,
            "enums": [{"name": "Role", "values": [{"name": "ADMIN"}, {"name": "USER"}]}],
        },
        "schema": {
            "inputObjectTypes": {"prisma": input_types},
            "outputObjectTypes": {"model": model_outputs, "prisma": prisma_outputs},
            "enumTypes": {
                "prisma": [
                    {"name": "SortOrder", "values": ["asc", "desc"]},
                    {"name": "EmployeeScalarFieldEnum", "values": [
                        "id", "name", "email", "role", "salary", "bio", "password", "tags", "companyId",
                    ]},
                ],
                "model": [{"name": "Role", "values": ["ADMIN", "USER"]}],
            },
        },
    }


# ---------------------------------------------------------------------- #
# Fixtures
# ---------------------------------------------------------------------- #
@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def tests_dir(project_root):
    """Return the tests directory."""
    return project_root / "tests"


@pytest.fixture(scope="session")
def templates_dir(project_root):
    """Return the bundled templates directory."""
    return project_root / "prisma_graphql_gen" / "templates"


@pytest.fixture
def temp_output_dir():
    """Create a temporary directory for generated output."""
    temp_dir = tempfile.mkdtemp(prefix="pgg_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def dmmf_dict():
    """Return a fresh DMMF document (safe to mutate)."""
    return copy.deepcopy(build_dmmf())


@pytest.fixture
def data_model(dmmf_dict):
    """Return the DataModel of the fixture document."""
    return data_model_from_dict(dmmf_dict)


@pytest.fixture
def dmmf_file(dmmf_dict, temp_output_dir):
    """Write the fixture document to disk the way a generator receives it."""
    path = temp_output_dir / "dmmf.json"
    path.write_text(json.dumps({"dmmf": dmmf_dict}), encoding="utf-8")
    return path


@pytest.fixture
def settings(temp_output_dir):
    """Default settings rooted at the temporary directory."""
    return Settings(project_root=str(temp_output_dir))


@pytest.fixture
def base_graphql(settings):
    """Path of the shared base schema file under the temporary project."""
    return settings.base_graphql_file


@pytest.fixture
def make_request():
    """Factory for generation requests against src/subgraphs/<module>."""
    def _make(entity_name="Employee", queries=(), mutations=(), module=None, custom_plurals=None):
        return GenerationRequest(
            entity_name=entity_name,
            module_path=f"src/subgraphs/{module or entity_name.lower()}",
            queries=list(queries),
            mutations=list(mutations),
            custom_plurals=dict(custom_plurals or {}),
        )
    return _make


@pytest.fixture
def build_schema():
    """
    Build an executable schema from generated SDL plus the base schema.

    Fails on any type referenced but never declared, which is how the tests
    check that a generated module is self-contained.
    """
    prelude = (
        "scalar Markdown\n\n"
        "type Query {\n  _empty: Boolean\n}\n\n"
        "type Mutation {\n  _empty: Boolean\n}\n"
    )

    def _build(*documents):
        return build_ast_schema(parse("\n".join((prelude, *documents))))
    return _build


@pytest.fixture(autouse=True)
def gen_logs_propagate():
    """Keep pgg.gen records visible to caplog after the CLI installed its own handler."""
    logger = logging.getLogger("pgg.gen")
    propagate, level = logger.propagate, logger.level
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    yield
    logger.propagate = propagate
    logger.setLevel(level)
