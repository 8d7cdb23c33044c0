"""Single-pass augmentation of a parsed content fragment."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from PIL import Image

from pager.html_utils import (
    HEADING_TAGS,
    Tag,
    is_web_url,
    references_file,
    resolve_local,
    text_content,
)
from pager.ids import IdentifierRegistry, slugify
from pager.schemas import Heading

logger = logging.getLogger(__name__)

# Errors Pillow raises for unreadable or unrecognised image headers.
_IMAGE_ERRORS = (OSError, SyntaxError, ValueError, Image.DecompressionBombError)


@dataclass
class AugmentResult:
    """What a walk over the fragment collected.

    Attributes:
        headings: Heading records in document order.
        links: Local ``href`` values queued for validation.
    """

    headings: list[Heading] = field(default_factory=list)
    links: list[str] = field(default_factory=list)


class TreeAugmenter:
    """Walks a fragment once, mutating attributes in place.

    Nodes are never inserted or removed; only attribute lists change.
    """

    def __init__(self, base_dir: Path, registry: IdentifierRegistry | None = None) -> None:
        self.base_dir = base_dir
        self.registry = registry if registry is not None else IdentifierRegistry()
        self.result = AugmentResult()

    def run(self, root: Tag) -> AugmentResult:
        for tag in _iter_elements(root):
            self.visit(tag)
        return self.result

    def visit(self, tag: Tag) -> None:
        if tag.name in HEADING_TAGS:
            self._identify_heading(tag)
        elif tag.has_attr("id"):
            tag["id"] = self.registry.reserve(tag["id"])

        if tag.name == "img":
            self._size_image(tag)
        self._check_sources(tag)
        if tag.name == "a":
            self._rewrite_anchor(tag)

    def _identify_heading(self, tag: Tag) -> None:
        level = int(tag.name[1])
        text = text_content(tag)
        if tag.has_attr("id"):
            assigned = self.registry.reserve(tag["id"])
        else:
            candidate = slugify(text)
            if not candidate:
                return
            assigned = self.registry.reserve(candidate)
        tag["id"] = assigned
        self.result.headings.append(Heading(level=level, id=assigned, text=text.strip()))

    def _size_image(self, tag: Tag) -> None:
        src = tag.get("src", "")
        if not tag.has_attr("alt"):
            logger.warning('<img src="%s"> missing alt text', src)
        if not references_file(src):
            return
        try:
            # Image.open only reads the header; pixel data is never decoded here.
            with Image.open(resolve_local(self.base_dir, src)) as image:
                width, height = image.size
        except _IMAGE_ERRORS:
            return
        declaration = f"aspect-ratio: {width} / {height}"
        existing = tag.get("style", "").rstrip().rstrip(";")
        tag["style"] = f"{existing}; {declaration}" if existing else declaration

    def _check_sources(self, tag: Tag) -> None:
        for attr in ("src", "poster"):
            if not tag.has_attr(attr):
                continue
            value = tag[attr]
            if not value:
                logger.warning("<%s> has empty %s attribute", tag.name, attr)
            elif references_file(value) and not resolve_local(self.base_dir, value).exists():
                logger.warning('<%s %s="%s"> references missing file', tag.name, attr, value)

    def _rewrite_anchor(self, tag: Tag) -> None:
        href = tag.get("href", "")
        if is_web_url(href):
            if not tag.has_attr("target"):
                tag["target"] = "_blank"
            if not tag.has_attr("rel"):
                tag["rel"] = "noopener"
        elif not href:
            logger.warning("<a> has empty href attribute")
        else:
            self.result.links.append(href)

        if not text_content(tag).strip() and not tag.has_attr("aria-label"):
            logger.warning('<a href="%s"> has no text and no aria-label', href)


def augment_fragment(
    root: Tag, base_dir: Path, registry: IdentifierRegistry | None = None
) -> AugmentResult:
    """Apply heading ids, image sizing, link rewriting and warnings to ``root``."""
    return TreeAugmenter(base_dir, registry).run(root)


def _iter_elements(root: Tag) -> Iterator[Tag]:
    # descendants is a pre-order walk; attribute edits do not disturb it.
    for node in root.descendants:
        if isinstance(node, Tag):
            yield node
