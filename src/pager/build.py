"""Build orchestrator: content directory -> ``index.html`` and ``index.md``."""

from __future__ import annotations

import logging
from pathlib import Path

from pager.assets import plan_stylesheets
from pager.config import CONTENT_FILENAME, MARKDOWN_FILENAME, OUTPUT_FILENAME
from pager.exceptions import BuildError
from pager.macros import syntax_theme_css
from pager.markdown_export import render_markdown_document
from pager.pipeline import process_content
from pager.render import render_page
from pager.schemas import BuildResult
from pager.site_config import check_site_config, load_site_config

logger = logging.getLogger(__name__)


def build_site(directory: Path, *, production: bool = False) -> BuildResult:
    """Build the page for the site in ``directory``.

    Every step that can fail runs before ``index.html`` is written, so a
    failed build leaves the previous output untouched.

    Args:
        directory: Content directory holding ``pager.yaml`` and ``content.html``.
        production: If True, local stylesheets are copied to content-hashed
            names instead of being versioned with a query string.

    Returns:
        The paths written and the stylesheet references used.

    Raises:
        BuildError: If the configuration or content cannot be read, the
            template fails to render, or an output file cannot be written.
    """
    config = load_site_config(directory)
    check_site_config(config, directory)

    content_path = directory / CONTENT_FILENAME
    try:
        raw_content = content_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BuildError(f"{CONTENT_FILENAME}: {exc}") from exc

    stylesheets = plan_stylesheets(config, directory, production=production)
    content_html = process_content(raw_content, directory)
    syntax_css = syntax_theme_css(config.syntax_theme) if config.syntax_theme else ""
    page = render_page(config, content_html, stylesheets, syntax_css=syntax_css)

    output_path = directory / OUTPUT_FILENAME
    _write_output(output_path, page)

    markdown_path: Path | None = directory / MARKDOWN_FILENAME
    try:
        document = render_markdown_document(config, content_html)
    except (ValueError, RecursionError) as exc:
        logger.warning("failed to generate %s: %s", MARKDOWN_FILENAME, exc)
        markdown_path = None
    else:
        _write_output(markdown_path, document)

    logger.debug("Wrote %s", output_path)
    return BuildResult(
        output_path=output_path,
        markdown_path=markdown_path,
        stylesheets=stylesheets.links,
    )


def _write_output(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise BuildError(f"{path.name}: {exc}") from exc
