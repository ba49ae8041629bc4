"""Plugin registry and hook execution."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from prisma_graphql_gen.api.gen_logging import get_logger
from prisma_graphql_gen.errors import GenerationHalted, PluginError
from .types import HOOK_PAYLOADS, ErrorPayload, HookName, HookPayload, Plugin, PluginConfig

logger = get_logger(__name__)


@dataclass
class Registration:
    plugin: Plugin
    config: PluginConfig


class PluginManager:
    """
    Runs plugin hooks for one generation run.

    Observers of a hook run in registration order; each receives the payload
    returned by the previous one.
    """

    def __init__(self):
        self._registrations: Dict[str, Registration] = {}

    # ------------------------------------------------------------------ #
    # Registry
    # ------------------------------------------------------------------ #
    def register(self, plugin: Plugin, config: Optional[PluginConfig] = None) -> None:
        if plugin.name in self._registrations:
            logger.warning(f"[PLUGINS] Plugin '{plugin.name}' is already registered. Overwriting...")
        self._registrations[plugin.name] = Registration(plugin, config or PluginConfig())
        logger.debug(f"[PLUGINS] Plugin '{plugin.name}' registered")

    def unregister(self, name: str) -> None:
        if self._registrations.pop(name, None) is None:
            logger.warning(f"[PLUGINS] Plugin '{name}' is not registered")
            return
        logger.debug(f"[PLUGINS] Plugin '{name}' unregistered")

    def is_registered(self, name: str) -> bool:
        return name in self._registrations

    def get_plugin(self, name: str) -> Optional[Plugin]:
        registration = self._registrations.get(name)
        return registration.plugin if registration else None

    def registered_plugins(self) -> List[Registration]:
        return list(self._registrations.values())

    def _enabled(self) -> List[Registration]:
        return [r for r in self._registrations.values() if r.config.enabled]

    # ------------------------------------------------------------------ #
    # Hooks
    # ------------------------------------------------------------------ #
    def execute(self, hook, payload: HookPayload) -> HookPayload:
        """
        Fold *payload* through every enabled observer of *hook*.

        Stops early when an observer sets `proceed=False`. An observer that
        raises is logged, reported to the on_error hook (unless this already
        is on_error) and re-raised as PluginError.
        """
        hook = HookName(hook)
        payload_type = HOOK_PAYLOADS[hook]
        if not isinstance(payload, payload_type):
            raise TypeError(
                f"Hook '{hook.value}' expects {payload_type.__name__}, got {type(payload).__name__}"
            )

        observers = [r for r in self._enabled() if hook in r.plugin.hooks]
        if not observers:
            return payload

        logger.debug(f"[PLUGINS] Executing '{hook.value}' for {len(observers)} plugin(s)")

        current = payload
        for registration in observers:
            name = registration.plugin.name
            try:
                result = registration.plugin.hooks[hook](current, registration.config)
                if result is not None and not isinstance(result, payload_type):
                    raise TypeError(
                        f"returned {type(result).__name__}, expected {payload_type.__name__}"
                    )
            except Exception as exc:
                logger.error(f"[PLUGINS] Hook '{hook.value}' failed in plugin '{name}': {exc}")
                if hook is not HookName.ON_ERROR:
                    self._report_error(exc, hook, name)
                raise PluginError(name, hook.value, exc) from exc

            if result is not None:
                current = result
            if not current.proceed:
                logger.info(f"[PLUGINS] Plugin '{name}' requested to stop generation at '{hook.value}'")
                break

        return current

    def dispatch(self, hook, payload: HookPayload) -> HookPayload:
        """execute(), raising GenerationHalted when an observer cleared `proceed`."""
        result = self.execute(hook, payload)
        if not result.proceed:
            raise GenerationHalted(HookName(hook).value, result)
        return result

    def _report_error(self, error, hook, plugin_name):
        try:
            self.execute(
                HookName.ON_ERROR,
                ErrorPayload(error=error, hook=hook.value, plugin_name=plugin_name),
            )
        except PluginError as nested:
            # the original failure is what the caller sees
            logger.error(f"[PLUGINS] Error hook failed while reporting: {nested}")

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    def initialize_all(self) -> None:
        enabled = self._enabled()
        logger.debug(f"[PLUGINS] Initializing {len(enabled)} plugin(s)")
        for registration in enabled:
            plugin = registration.plugin
            if plugin.initialize is None:
                continue
            try:
                plugin.initialize(registration.config)
            except Exception as exc:
                logger.error(f"[PLUGINS] Failed to initialize plugin '{plugin.name}': {exc}")

    def cleanup_all(self) -> None:
        enabled = self._enabled()
        logger.debug(f"[PLUGINS] Cleaning up {len(enabled)} plugin(s)")
        for registration in enabled:
            plugin = registration.plugin
            if plugin.cleanup is None:
                continue
            try:
                plugin.cleanup()
            except Exception as exc:
                logger.error(f"[PLUGINS] Failed to clean up plugin '{plugin.name}': {exc}")
