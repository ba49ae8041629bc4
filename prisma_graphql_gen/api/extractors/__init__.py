"""Data model extraction utilities."""

from .type_mapper import map_scalar, wrap_type, unwrap_type
from .field_extractor import (
    parse_annotations,
    is_ignored,
    extract_field_type,
    prepare_entity_fields,
)

__all__ = [
    "map_scalar",
    "wrap_type",
    "unwrap_type",
    "parse_annotations",
    "is_ignored",
    "extract_field_type",
    "prepare_entity_fields",
]
