"""Builders for operation signatures and the type closure."""

from .operation_builder import (
    Argument,
    ReturnType,
    OperationSignature,
    EntityNames,
    MaterializedOperations,
    select_preferred_input,
    entity_names,
    operation_name,
    materialize_operation,
    materialize_operations,
    available_operations,
)
from .type_closure import (
    TypeField,
    TypeDeclaration,
    ResolvedTypes,
    resolve_types,
    register_enums,
    render_enum,
    enum_declaration_exists,
)

__all__ = [
    "Argument",
    "ReturnType",
    "OperationSignature",
    "EntityNames",
    "MaterializedOperations",
    "select_preferred_input",
    "entity_names",
    "operation_name",
    "materialize_operation",
    "materialize_operations",
    "available_operations",
    "TypeField",
    "TypeDeclaration",
    "ResolvedTypes",
    "resolve_types",
    "register_enums",
    "render_enum",
    "enum_declaration_exists",
]
