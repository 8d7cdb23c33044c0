"""Render the page template."""

from __future__ import annotations

from functools import lru_cache

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape
from markupsafe import Markup

from pager.assets import StylesheetPlan
from pager.exceptions import TemplateRenderError
from pager.schemas import SiteConfig

PAGE_TEMPLATE = "page.html"


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=PackageLoader("pager", "templates"),
        autoescape=select_autoescape(["html"]),
        keep_trailing_newline=True,
    )


def render_page(
    config: SiteConfig,
    content_html: str,
    stylesheets: StylesheetPlan,
    *,
    syntax_css: str = "",
) -> str:
    """Render the final page.

    ``content_html``, ``config.inject`` and inline styles are trusted HTML/CSS
    and are inserted without escaping; every other field is escaped.

    Raises:
        TemplateRenderError: If the template cannot be loaded or rendered.
    """
    try:
        template = _environment().get_template(PAGE_TEMPLATE)
        return template.render(
            title=config.title,
            description=config.description,
            favicon=config.favicon,
            card=config.card,
            site_url=config.site_url,
            css=stylesheets.links,
            inline_styles=[Markup(style) for style in stylesheets.inline],
            syntax_css=Markup(syntax_css),
            inject=Markup(config.inject),
            content=Markup(content_html),
        )
    except TemplateError as exc:
        raise TemplateRenderError(f"template: {exc}") from exc
