"""Content pipeline: raw content fragment -> final content HTML."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pager.augment import augment_fragment
from pager.html_utils import ParserRejectedMarkup, parse_fragment
from pager.ids import IdentifierRegistry
from pager.links import validate_links
from pager.macros import expand_macros
from pager.toc import build_toc

logger = logging.getLogger(__name__)

TOC_PLACEHOLDER = "<!--TOC_PLACEHOLDER-->"
_TOC_RE = re.compile(r"<toc\s*/>|<toc>\s*</toc>")


def process_content(raw_content: str, base_dir: Path) -> str:
    """Expand, parse, augment, validate and serialize a content fragment.

    Every call starts from an empty identifier registry. If the fragment
    cannot be parsed, the expanded text is returned without augmentation.
    """
    content = expand_macros(raw_content, base_dir)

    content, toc_count = _TOC_RE.subn(TOC_PLACEHOLDER, content)

    try:
        fragment = parse_fragment(content)
    except ParserRejectedMarkup as exc:
        logger.warning("content could not be parsed, leaving it unprocessed: %s", exc)
        return content

    registry = IdentifierRegistry()
    result = augment_fragment(fragment, base_dir, registry)
    validate_links(result.links, registry, base_dir)

    html = str(fragment)
    if toc_count:
        html = html.replace(TOC_PLACEHOLDER, build_toc(result.headings))
    return html
