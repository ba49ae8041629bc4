"""Exception hierarchy for the generation pipeline."""
from __future__ import annotations


class GeneratorError(Exception):
    """Base class for every failure raised by the generator."""


class ConfigurationError(GeneratorError):
    """Invalid or unreadable generator configuration."""

    def __init__(self, errors: list[str] | str, source: str | None = None) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"Invalid configuration{where}: " + "; ".join(self.errors))


class EntityNotFoundError(GeneratorError):
    """The requested entity is absent from the data model."""

    def __init__(self, entity_name: str) -> None:
        self.entity_name = entity_name
        super().__init__(f"Model {entity_name} not found in DMMF")


class OperationNotFoundError(GeneratorError):
    """The data model has no catalog entry for an operation on an entity."""

    def __init__(self, operation: str, entity_name: str, root: str) -> None:
        self.operation = operation
        self.entity_name = entity_name
        self.root = root
        super().__init__(
            f"Operation '{operation}' is not supported for model '{entity_name}': "
            f"no matching field in {root}"
        )


class ArtifactParseError(GeneratorError):
    """An existing artifact could not be parsed for merging."""

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Cannot merge into {path}: {detail}")


class TemplateRenderError(GeneratorError):
    """A template is missing or failed to render."""

    def __init__(self, template: str, detail: str) -> None:
        self.template = template
        super().__init__(f"Template '{template}' failed: {detail}")


class PluginError(GeneratorError):
    """A plugin observer raised while handling a hook."""

    def __init__(self, plugin_name: str, hook: str, error: BaseException) -> None:
        self.plugin_name = plugin_name
        self.hook = hook
        self.error = error
        super().__init__(f"Plugin '{plugin_name}' failed in hook '{hook}': {error}")


class GenerationHalted(GeneratorError):
    """A plugin asked the pipeline to stop; carries the halting payload."""

    def __init__(self, hook: str, payload) -> None:
        self.hook = hook
        self.payload = payload
        super().__init__(f"Generation stopped by a plugin at '{hook}'")
