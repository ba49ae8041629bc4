"""Built-in plugin that refuses to write invalid SDL or Python."""

import ast
import re

from graphql import GraphQLError, parse

from prisma_graphql_gen.plugins.types import HookName, Plugin

_GRAPHQL_NAME = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")


class GeneratedContentError(ValueError):
    pass


def _check_operation(payload, config):
    name = payload.operation.name
    if not _GRAPHQL_NAME.match(name):
        raise GeneratedContentError(f"'{name}' is not a valid GraphQL field name")
    argument_names = [argument.name for argument in payload.operation.arguments]
    if len(argument_names) != len(set(argument_names)):
        raise GeneratedContentError(f"{name} declares an argument twice")
    return None


def _check_sdl(payload, config):
    try:
        parse(payload.content)
    except GraphQLError as exc:
        raise GeneratedContentError(f"{payload.path}: invalid SDL: {exc.message}") from exc
    return None


def _check_python(payload, config):
    try:
        ast.parse(payload.content)
    except SyntaxError as exc:
        raise GeneratedContentError(
            f"{payload.path}: invalid Python at line {exc.lineno}: {exc.msg}"
        ) from exc
    return None


def create_validation_plugin() -> Plugin:
    return Plugin(
        name="validation",
        version="1.0.0",
        description="Validates generated operations, SDL and resolver modules",
        hooks={
            HookName.ON_PREPARED_OPERATION: _check_operation,
            HookName.ON_SDL_GENERATED: _check_sdl,
            HookName.ON_RESOLVER_GENERATED: _check_python,
        },
    )
