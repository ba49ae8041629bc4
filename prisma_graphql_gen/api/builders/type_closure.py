"""
Type closure resolution.

Starting from an entity and its materialized operations, collect every input
and output object type the generated SDL has to declare, following nested
type references through the DMMF catalog. Enums are collected separately and
registered once in the shared base schema file.
"""

import re
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from prisma_graphql_gen.api.crud_helpers import get_operation_input_types
from prisma_graphql_gen.api.extractors.type_mapper import map_scalar, wrap_type
from prisma_graphql_gen.api.gen_logging import get_logger
from prisma_graphql_gen.api.utils.files import read_existing_file, write_file_safely
from prisma_graphql_gen.datamodel import (
    ENUM_TYPES,
    INPUT_OBJECT_TYPES,
    OUTPUT_OBJECT_TYPES,
    SCALAR,
)
from prisma_graphql_gen.plugins.manager import PluginManager
from prisma_graphql_gen.plugins.types import (
    HookName,
    PreparedTypeFieldPayload,
    PreparedTypePayload,
)
from .operation_builder import select_preferred_input

logger = get_logger(__name__)

_VARIANT_LOCATIONS = {
    INPUT_OBJECT_TYPES: "input",
    OUTPUT_OBJECT_TYPES: "output",
}


@dataclass
class TypeField:
    name: str
    type_name: str
    location: str = SCALAR
    is_list: bool = False
    is_required: bool = False
    is_nullable: bool = False

    def sdl_type(self) -> str:
        return wrap_type(self.type_name, is_list=self.is_list, is_required=self.is_required)

    def to_sdl(self) -> str:
        return f"{self.name}: {self.sdl_type()}"


@dataclass
class TypeDeclaration:
    name: str
    variant: str
    fields: List[TypeField] = field(default_factory=list)
    grouping: Optional[str] = None

    @property
    def keyword(self) -> str:
        return "input" if self.variant == "input" else "type"

    def to_sdl(self) -> str:
        if not self.fields:
            return f"{self.keyword} {self.name}"
        body = "\n".join(f"  {type_field.to_sdl()}" for type_field in self.fields)
        return f"{self.keyword} {self.name} {{\n{body}\n}}"


@dataclass
class ResolvedTypes:
    inputs: List[TypeDeclaration] = field(default_factory=list)
    outputs: List[TypeDeclaration] = field(default_factory=list)
    enums: List[str] = field(default_factory=list)

    def declarations(self, variant) -> List[TypeDeclaration]:
        return self.inputs if variant == "input" else self.outputs

    def names(self, variant) -> List[str]:
        return [declaration.name for declaration in self.declarations(variant)]

    def without_output(self, name) -> "ResolvedTypes":
        """Copy without the output declaration called *name* (the entity's own type)."""
        return ResolvedTypes(
            inputs=list(self.inputs),
            outputs=[declaration for declaration in self.outputs if declaration.name != name],
            enums=list(self.enums),
        )


class _Closure:
    """FIFO work-list over (variant, type name); every key is processed at most once."""

    def __init__(self, data_model, type_mappings, plugins):
        self.data_model = data_model
        self.type_mappings = type_mappings
        self.plugins = plugins
        self.queue = deque()
        self.queued = set()
        # dict keeps first-seen order
        self.enums: Dict[str, None] = {}
        self.result = ResolvedTypes()

    def need(self, variant, name, namespace=None):
        key = (variant, name)
        if key in self.queued:
            return
        self.queued.add(key)
        self.queue.append((variant, name, namespace))

    def need_ref(self, location, name, namespace=None):
        if location == ENUM_TYPES:
            self.enums.setdefault(name, None)
        elif location in _VARIANT_LOCATIONS:
            self.need(_VARIANT_LOCATIONS[location], name, namespace)

    def run(self) -> ResolvedTypes:
        while self.queue:
            variant, name, namespace = self.queue.popleft()
            declaration = self._declare(variant, name, namespace)
            if declaration is not None:
                self.result.declarations(variant).append(declaration)
        self.result.enums = list(self.enums)
        return self.result

    def _declare(self, variant, name, namespace):
        catalog_type = (
            self.data_model.find_type(name, variant, namespace)
            or self.data_model.find_type(name, variant)
        )
        if catalog_type is None:
            logger.debug(f"[TYPES] {variant} type '{name}' not in catalog, skipped")
            return None

        fields = []
        for catalog_field in catalog_type.fields:
            type_field = self._field(variant, catalog_field)
            if type_field is None:
                continue
            payload = self.plugins.dispatch(
                HookName.ON_PREPARED_TYPE_FIELD,
                PreparedTypeFieldPayload(type_name=name, variant=variant, field=type_field),
            )
            if payload.include:
                fields.append(payload.field)

        declaration = TypeDeclaration(
            name=catalog_type.name,
            variant=variant,
            fields=fields,
            grouping=getattr(catalog_type, "grouping", None),
        )
        payload = self.plugins.dispatch(
            HookName.ON_PREPARED_TYPE, PreparedTypePayload(declaration=declaration),
        )
        logger.debug(f"[TYPES] {variant} {name}: {len(payload.declaration.fields)} field(s)")
        return payload.declaration

    def _field(self, variant, catalog_field):
        if variant == "input":
            preferred = select_preferred_input(catalog_field.input_types)
            is_required = catalog_field.is_required
        else:
            preferred = catalog_field.output_type
            is_required = not catalog_field.is_nullable
        if preferred is None:
            return None

        self.need_ref(preferred.location, preferred.type, preferred.namespace)
        type_name = (
            map_scalar(preferred.type, self.type_mappings) if preferred.location == SCALAR
            else preferred.type
        )
        return TypeField(
            name=catalog_field.name,
            type_name=type_name,
            location=preferred.location,
            is_list=preferred.is_list,
            is_required=is_required,
            is_nullable=catalog_field.is_nullable,
        )


def resolve_types(entity, operations, data_model, type_mappings=None,
                  plugins: Optional[PluginManager] = None) -> ResolvedTypes:
    """
    Compute the input/output declarations needed by *operations* on *entity*.

    Seeds, in order: the entity's output type, every operation's return type,
    the fixed per-kind input types and the types of the operation arguments.
    Types missing from the catalog are skipped. Output order follows the
    order in which types were first needed.
    """
    closure = _Closure(data_model, type_mappings, plugins or PluginManager())

    closure.need("output", entity.name)
    for entity_field in entity.fields:
        if entity_field.kind == "enum":
            closure.need_ref(ENUM_TYPES, entity_field.type)

    for operation in operations:
        if operation.return_type is not None:
            closure.need_ref(
                operation.return_type.location,
                operation.return_type.type_name,
                operation.return_type.namespace,
            )
    for operation in operations:
        for input_name in get_operation_input_types(operation.kind, entity.name):
            closure.need("input", input_name)
    for operation in operations:
        for argument in operation.arguments:
            closure.need_ref(argument.location, argument.type_name, argument.namespace)

    resolved = closure.run()
    logger.info(
        f"[TYPES] {entity.name}: {len(resolved.inputs)} input, "
        f"{len(resolved.outputs)} output, {len(resolved.enums)} enum type(s)"
    )
    return resolved


def enum_declaration_exists(content, enum_name) -> bool:
    return re.search(rf"\benum\s+{re.escape(enum_name)}\b", content) is not None


def render_enum(enum) -> str:
    values = "\n".join(f"  {value}" for value in enum.values)
    return f"enum {enum.name} {{\n{values}\n}}\n"


def register_enums(enum_names, data_model, base_path, write=None) -> List[str]:
    """
    Append missing `enum X { ... }` blocks to the shared base schema file.

    An enum already declared in the file (by name, as a whole word) is left
    alone. The file is created when absent and written once, through *write*
    (path, content), only when something was appended. Returns the names added.
    """
    write = write or write_file_safely
    content = read_existing_file(base_path) or ""
    added = []

    for enum_name in enum_names:
        if enum_declaration_exists(content, enum_name):
            continue
        enum = data_model.get_enum(enum_name)
        if enum is None:
            logger.warning(f"[ENUMS] Enum '{enum_name}' not found in DMMF, skipped")
            continue
        block = render_enum(enum)
        content = f"{content.rstrip()}\n\n{block}" if content.strip() else block
        added.append(enum_name)

    if added:
        write(str(base_path), content)
        logger.info(f"[ENUMS] Added {', '.join(added)} to {base_path}")
    return added
