"""Utility functions for the generator."""

from .files import read_existing_file, write_file_safely
from .formatters import format_graphql_sdl, format_python_code
from .strings import camel_case, pascal_case, pluralize, singularize

__all__ = [
    "read_existing_file",
    "write_file_safely",
    "format_graphql_sdl",
    "format_python_code",
    "camel_case",
    "pascal_case",
    "pluralize",
    "singularize",
]
