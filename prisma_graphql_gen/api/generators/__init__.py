"""Artifact generators: template rendering and structural merging."""

from .template_renderer import TemplateRenderer
from .handler_generator import build_handler_context, render_handler
from .schema_merger import merge_schema
from .resolver_merger import merge_resolvers

__all__ = [
    "TemplateRenderer",
    "build_handler_context",
    "render_handler",
    "merge_schema",
    "merge_resolvers",
]
