"""Plugins shipped with the generator, addressable by name in the config."""

from .stage_logging import create_logging_plugin
from .formatting import create_formatting_plugin
from .validation import create_validation_plugin, GeneratedContentError
from .field_transform import create_field_transform_plugin

BUILTIN_PLUGINS = {
    "logging": create_logging_plugin,
    "formatting": create_formatting_plugin,
    "validation": create_validation_plugin,
    "field-transform": create_field_transform_plugin,
}

__all__ = [
    "BUILTIN_PLUGINS",
    "GeneratedContentError",
    "create_logging_plugin",
    "create_formatting_plugin",
    "create_validation_plugin",
    "create_field_transform_plugin",
]
