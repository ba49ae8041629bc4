"""Code formatting utilities."""

import black
from graphql import GraphQLError, parse, print_ast

from prisma_graphql_gen.api.gen_logging import get_logger

logger = get_logger(__name__)


def format_python_code(code: str) -> str:
    """Format generated Python code with Black; code Black cannot parse is returned as-is."""
    try:
        return black.format_str(code, mode=black.Mode())
    except black.InvalidInput as exc:
        logger.warning(f"[FORMAT] Black could not format the module: {exc}")
        return code


def format_graphql_sdl(sdl: str) -> str:
    """Re-print an SDL document in graphql-core's canonical layout."""
    try:
        return print_ast(parse(sdl)) + "\n"
    except GraphQLError as exc:
        logger.warning(f"[FORMAT] SDL could not be formatted: {exc.message}")
        return sdl
