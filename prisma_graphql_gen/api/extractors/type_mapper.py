"""Type mapping from Prisma scalar types to GraphQL type references."""

from prisma_graphql_gen.config import DEFAULT_TYPE_MAPPINGS


def map_scalar(type_name, mapping=None):
    """
    Map a Prisma scalar name to its GraphQL scalar.

    Unmapped names (enums, models, custom scalars) are returned unchanged.
    """
    table = DEFAULT_TYPE_MAPPINGS if mapping is None else mapping
    return table.get(type_name, type_name)


def wrap_type(base, is_list=False, is_required=False, non_null_element=True):
    """
    Build a GraphQL type reference.

    wrap_type("Employee", is_list=True, is_required=True) -> "[Employee!]!"
    """
    sdl = base
    if is_list:
        sdl = f"[{base}!]" if non_null_element else f"[{base}]"
    if is_required:
        sdl += "!"
    return sdl


def unwrap_type(sdl):
    """"[Employee!]!" -> "Employee" """
    return sdl.replace("[", "").replace("]", "").replace("!", "").strip()
