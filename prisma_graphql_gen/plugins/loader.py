"""Build a PluginManager from the `plugins` section of the settings."""

import importlib

from prisma_graphql_gen.api.gen_logging import get_logger
from prisma_graphql_gen.errors import ConfigurationError
from .builtin import BUILTIN_PLUGINS
from .manager import PluginManager
from .types import Plugin, PluginConfig

logger = get_logger(__name__)


def load_plugin(name) -> Plugin:
    """
    Resolve a plugin reference.

    Built-ins are referenced by name ("logging", "formatting", "validation",
    "field-transform"); anything else must be "package.module:attribute",
    where the attribute is a Plugin or a factory returning one.
    """
    if name in BUILTIN_PLUGINS:
        return BUILTIN_PLUGINS[name]()

    module_name, _, attribute = name.partition(":")
    if not attribute:
        raise ConfigurationError(
            f"Unknown plugin '{name}': use a built-in name or 'module:attribute'"
        )
    target = getattr(importlib.import_module(module_name), attribute)
    plugin = target if isinstance(target, Plugin) else target()
    if not isinstance(plugin, Plugin):
        raise ConfigurationError(f"'{name}' did not provide a Plugin")
    return plugin


def load_plugins(entries, manager=None) -> PluginManager:
    """Register every loadable entry; entries that fail to load are logged and skipped."""
    manager = manager or PluginManager()
    for entry in entries:
        try:
            plugin = load_plugin(entry.name)
        except (ImportError, AttributeError, TypeError, ConfigurationError) as exc:
            logger.error(f"[PLUGINS] Could not load plugin '{entry.name}': {exc}")
            continue
        manager.register(plugin, PluginConfig(enabled=entry.enabled, options=dict(entry.options)))
    return manager


def create_default_manager(settings) -> PluginManager:
    """A manager preloaded with the plugins listed in *settings*."""
    return load_plugins(settings.plugins)
