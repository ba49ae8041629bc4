"""Built-in plugin that formats files before they are written."""

from dataclasses import replace

from prisma_graphql_gen.api.utils.formatters import format_graphql_sdl, format_python_code
from prisma_graphql_gen.plugins.types import HookName, Plugin


def _format_file(payload, config):
    options = config.options
    if payload.path.endswith(".py") and options.get("python", True):
        return replace(payload, content=format_python_code(payload.content))
    if payload.path.endswith(".graphql") and options.get("graphql", True):
        return replace(payload, content=format_graphql_sdl(payload.content))
    return None


def create_formatting_plugin() -> Plugin:
    return Plugin(
        name="formatting",
        version="1.0.0",
        description="Formats generated Python with Black and SDL with the graphql-core printer",
        hooks={HookName.ON_FILE_WRITE: _format_file},
    )
