"""Extract the GraphQL fields of an entity, honouring `///` annotations."""

import re

from prisma_graphql_gen.api.gen_logging import get_logger
from .type_mapper import map_scalar, wrap_type

logger = get_logger(__name__)

IGNORE_TOKEN = "gqlIgnore"
TYPE_TOKEN = "gqlType"
NON_NULL_ELEMENT_TOKEN = "gqlNonNullElement"

_ANNOTATION = re.compile(r"@(\w+)(?:[ \t]+([^\s@]+))?")


def parse_annotations(documentation):
    """
    Parse `@token value?` annotations from a field's documentation.

    Returns a dict token -> value (None for bare tokens). Unknown tokens are kept;
    callers only look at the ones they understand.
    """
    if not documentation:
        return {}
    return {match.group(1): match.group(2) for match in _ANNOTATION.finditer(documentation)}


def is_ignored(field):
    return IGNORE_TOKEN in parse_annotations(field.documentation)


def extract_field_type(field, mapping=None):
    """
    GraphQL type reference of an entity field.

    @gqlType replaces the mapped base type; @gqlNonNullElement makes list
    elements non-null. Scalars go through the type mapping, enums and relations
    keep their model names.
    """
    annotations = parse_annotations(field.documentation)

    base = annotations.get(TYPE_TOKEN)
    if not base:
        base = map_scalar(field.type, mapping) if field.kind == "scalar" else field.type

    return wrap_type(
        base,
        is_list=field.is_list,
        is_required=field.is_required,
        non_null_element=NON_NULL_ELEMENT_TOKEN in annotations,
    )


def prepare_entity_fields(entity, mapping=None):
    """Template context for the entity's own type: [{"name", "type"}] in model order."""
    fields = []
    for field in entity.fields:
        if is_ignored(field):
            logger.debug(f"[FIELDS] {entity.name}.{field.name} ignored (@{IGNORE_TOKEN})")
            continue
        fields.append({
            "name": field.name,
            "type": extract_field_type(field, mapping),
        })
    return fields
