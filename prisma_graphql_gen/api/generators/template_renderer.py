"""Render fresh artifacts from the Jinja templates."""

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)

from prisma_graphql_gen.api.gen_logging import get_logger
from prisma_graphql_gen.errors import TemplateRenderError

logger = get_logger(__name__)


class TemplateRenderer:
    """Jinja environment over one templates directory."""

    def __init__(self, templates_dir):
        self.templates_dir = templates_dir
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(disabled_extensions=("jinja",)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render(self, template_name, data) -> str:
        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound as exc:
            raise TemplateRenderError(
                template_name, f"not found in {self.templates_dir}"
            ) from exc
        except TemplateError as exc:
            raise TemplateRenderError(template_name, str(exc)) from exc

        try:
            rendered = template.render(**data)
        except TemplateError as exc:
            raise TemplateRenderError(template_name, str(exc)) from exc

        logger.debug(f"[RENDER] {template_name}: {len(rendered)} chars")
        return rendered
