"""Default resolver handler bodies, one shape per operation kind."""

from prisma_graphql_gen.api.crud_helpers import get_client_call
from prisma_graphql_gen.config import message_template_error
from prisma_graphql_gen.errors import ConfigurationError


def _argument_expr(source):
    """'where' -> args.get("where"); ("create", "update") -> {"create": args.get("create"), ...}"""
    if isinstance(source, tuple):
        items = ", ".join(f'"{name}": args.get("{name}")' for name in source)
        return "{" + items + "}"
    return f'args.get("{source}")'


def not_implemented_message(operation, template) -> str:
    error = message_template_error(template)
    if error:
        raise ConfigurationError(error)
    return template.format(operation_name=operation.kind, field_name=operation.name)


def build_handler_context(operation, delegate, resolver_settings):
    """Template data for one handler of *operation*."""
    call = get_client_call(operation.kind)
    context = {
        "name": operation.name,
        "description": operation.description or f"{operation.kind} operation",
        "data_source": resolver_settings.data_source,
        "delegate": delegate,
        "method": None,
        "keywords": [],
        "error_message": None,
    }
    if call is None:
        context["error_message"] = repr(
            not_implemented_message(operation, resolver_settings.error_message_template)
        )
    else:
        method, keywords = call
        context["method"] = method
        context["keywords"] = [
            {"name": keyword, "value": _argument_expr(source)} for keyword, source in keywords
        ]
    return context


def render_handler(renderer, template_name, operation, delegate, resolver_settings) -> str:
    """Handler source at column 0, without a trailing newline."""
    context = build_handler_context(operation, delegate, resolver_settings)
    return renderer.render(template_name, context).rstrip("\n")
