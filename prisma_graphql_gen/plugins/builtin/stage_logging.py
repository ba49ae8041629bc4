"""Built-in plugin that logs every stage of a generation run."""

from prisma_graphql_gen.api.gen_logging import get_logger
from prisma_graphql_gen.plugins.types import HookName, Plugin

logger = get_logger(__name__)


def _describe(hook, payload) -> str:
    if hook is HookName.ON_ERROR:
        return f"{type(payload.error).__name__}: {payload.error} (during {payload.hook})"
    if hook in (HookName.ON_GENERATE_START, HookName.ON_MODULE_NOT_FOUND):
        request = payload.request
        return f"model={request.entity_name} module={request.module_path}"
    if hook is HookName.ON_MODEL_FOUND:
        return f"{payload.entity.name} ({len(payload.entity.fields)} fields)"
    if hook is HookName.ON_PREPARED_OPERATION:
        return payload.operation.to_sdl()
    if hook is HookName.ON_PREPARED_TYPE:
        return f"{payload.declaration.variant} {payload.declaration.name}"
    if hook is HookName.ON_PREPARED_TYPE_FIELD:
        return f"{payload.type_name}.{payload.field.name}"
    if hook is HookName.ON_TYPES_GENERATED:
        types = payload.types
        return f"{len(types.inputs)} input, {len(types.outputs)} output, {len(types.enums)} enum"
    if hook is HookName.ON_GENERATION_FINISHED:
        return f"{payload.entity_name}: {len(payload.artifacts)} file(s) written"
    path = getattr(payload, "path", None)
    return path or ""


def _stage_logger(hook):
    def handle(payload, config):
        level = str(config.options.get("level", "info")).lower()
        # per-field and per-type hooks are noisy
        if hook in (HookName.ON_PREPARED_TYPE_FIELD, HookName.ON_PREPARED_TYPE) and level != "debug":
            return None
        log = logger.error if hook is HookName.ON_ERROR else logger.info
        log(f"[{hook.value}] {_describe(hook, payload)}")
        return None
    return handle


def create_logging_plugin() -> Plugin:
    return Plugin(
        name="logging",
        version="1.0.0",
        description="Logs every generation stage",
        hooks={hook: _stage_logger(hook) for hook in HookName},
    )
