"""Plugin system: hook points, payloads, the manager and plugin loading."""

from .types import HookName, HookPayload, HOOK_PAYLOADS, Plugin, PluginConfig
from .manager import PluginManager
from .loader import create_default_manager, load_plugin, load_plugins

__all__ = [
    "HookName",
    "HookPayload",
    "HOOK_PAYLOADS",
    "Plugin",
    "PluginConfig",
    "PluginManager",
    "create_default_manager",
    "load_plugin",
    "load_plugins",
]
