"""
Operation materialization: abstract operation kind + entity -> concrete
GraphQL field signature, built from the DMMF root operation catalog.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from prisma_graphql_gen.api.crud_helpers import (
    OPERATION_KINDS,
    get_operation_root,
    get_prisma_func,
    is_many_operation,
)
from prisma_graphql_gen.api.extractors.type_mapper import map_scalar
from prisma_graphql_gen.api.gen_logging import get_logger
from prisma_graphql_gen.api.utils.strings import (
    COMMON_PLURALS,
    camel_case,
    pascal_case,
    pluralize,
    singularize,
)
from prisma_graphql_gen.datamodel import SCALAR
from prisma_graphql_gen.errors import OperationNotFoundError
from prisma_graphql_gen.plugins.manager import PluginManager
from prisma_graphql_gen.plugins.types import HookName, PreparedOperationPayload

logger = get_logger(__name__)


@dataclass(frozen=True)
class Argument:
    name: str
    type_name: str
    location: str = SCALAR
    namespace: Optional[str] = None
    is_required: bool = False

    def to_sdl(self) -> str:
        return f"{self.name}: {self.type_name}{'!' if self.is_required else ''}"


@dataclass(frozen=True)
class ReturnType:
    type_name: str
    location: str
    namespace: Optional[str] = None
    is_list: bool = False
    is_nullable: bool = True

    def to_sdl(self) -> str:
        sdl = f"[{self.type_name}!]" if self.is_list else self.type_name
        return sdl if self.is_nullable else sdl + "!"


@dataclass(frozen=True)
class OperationSignature:
    name: str
    kind: str
    root: str
    arguments: Tuple[Argument, ...] = ()
    return_type: Optional[ReturnType] = None
    description: str = ""

    @property
    def args_sdl(self) -> str:
        return ", ".join(argument.to_sdl() for argument in self.arguments)

    @property
    def return_sdl(self) -> str:
        return self.return_type.to_sdl() if self.return_type else "Boolean"

    def to_sdl(self) -> str:
        """employeesFindMany(where: EmployeeWhereInput): [Employee!]!"""
        args = f"({self.args_sdl})" if self.arguments else ""
        return f"{self.name}{args}: {self.return_sdl}"


@dataclass
class EntityNames:
    """Name variants of an entity used by operation names and templates."""

    name: str
    lower: str
    singular: str
    plural: str


@dataclass
class MaterializedOperations:
    queries: List[OperationSignature] = field(default_factory=list)
    mutations: List[OperationSignature] = field(default_factory=list)

    @property
    def all(self) -> List[OperationSignature]:
        return [*self.queries, *self.mutations]


def select_preferred_input(options):
    """
    Pick one type out of the candidate input types of an argument or field.

    Preference: non-null scalar, then any non-null type, then the first option.
    """
    for option in options:
        if option.location == SCALAR and option.type != "Null":
            return option
    for option in options:
        if option.type != "Null":
            return option
    return options[0] if options else None


def entity_names(entity_name, custom_plurals=None) -> EntityNames:
    lower = camel_case(entity_name)
    singular = singularize(lower) if lower.lower() in COMMON_PLURALS else lower
    return EntityNames(
        name=entity_name,
        lower=lower,
        singular=singular,
        plural=pluralize(lower, custom_plurals),
    )


def operation_name(kind, entity_name, custom_plurals=None) -> str:
    """("findMany", "Employee") -> "employeesFindMany"; ("create", "Category") -> "categoryCreate"."""
    names = entity_names(entity_name, custom_plurals)
    prefix = names.plural if is_many_operation(kind) else names.singular
    return f"{prefix}{pascal_case(kind)}"


def _build_arguments(catalog_args, type_mappings) -> Tuple[Argument, ...]:
    arguments = []
    seen = set()
    for arg in catalog_args:
        if arg.name in seen:
            logger.debug(f"[OPERATIONS] Dropping duplicate argument '{arg.name}'")
            continue
        preferred = select_preferred_input(arg.input_types)
        if preferred is None:
            continue
        seen.add(arg.name)
        type_name = (
            map_scalar(preferred.type, type_mappings) if preferred.location == SCALAR
            else preferred.type
        )
        arguments.append(Argument(
            name=arg.name,
            type_name=type_name,
            location=preferred.location,
            namespace=preferred.namespace,
            is_required=arg.is_required,
        ))
    return tuple(arguments)


def materialize_operation(kind, entity_name, data_model, type_mappings=None,
                          custom_plurals=None, plugins: Optional[PluginManager] = None, root=None):
    """
    Build the signature of one operation on an entity.

    Raises OperationNotFoundError when the root operation catalog has no
    `{prismaFunc}{Entity}` field for the requested kind.
    """
    plugins = plugins or PluginManager()
    root = root or get_operation_root(kind)
    prisma_func = get_prisma_func(kind)

    catalog_field = (
        data_model.operation_field(root, f"{prisma_func}{entity_name}") if prisma_func else None
    )
    if catalog_field is None:
        raise OperationNotFoundError(kind, entity_name, root)

    output = catalog_field.output_type
    return_type = ReturnType(
        type_name=map_scalar(output.type, type_mappings) if output.location == SCALAR else output.type,
        location=output.location,
        namespace=output.namespace,
        is_list=output.is_list,
        is_nullable=catalog_field.is_nullable,
    )

    signature = OperationSignature(
        name=operation_name(kind, entity_name, custom_plurals),
        kind=kind,
        root=root,
        arguments=_build_arguments(catalog_field.args, type_mappings),
        return_type=return_type,
        description=f"{kind} operation for {entity_name}",
    )

    payload = plugins.dispatch(
        HookName.ON_PREPARED_OPERATION, PreparedOperationPayload(operation=signature),
    )
    logger.debug(f"[OPERATIONS] {root}.{payload.operation.to_sdl()}")
    return payload.operation


def materialize_operations(entity_name, queries, mutations, data_model, type_mappings=None,
                           custom_plurals=None, plugins=None) -> MaterializedOperations:
    """Materialize every requested query and mutation, in request order."""
    result = MaterializedOperations()
    for root, kinds, target in (
        ("Query", queries, result.queries),
        ("Mutation", mutations, result.mutations),
    ):
        seen = set()
        for kind in kinds:
            if kind in seen:
                continue
            seen.add(kind)
            target.append(materialize_operation(
                kind, entity_name, data_model,
                type_mappings=type_mappings,
                custom_plurals=custom_plurals,
                plugins=plugins,
                root=root,
            ))
    return result


def available_operations(entity_name, data_model):
    """Operation kinds the root catalog supports for an entity, per root type."""
    available = {"Query": [], "Mutation": []}
    for kind in OPERATION_KINDS:
        root = get_operation_root(kind)
        if data_model.operation_field(root, f"{get_prisma_func(kind)}{entity_name}") is not None:
            available[root].append(kind)
    return available
