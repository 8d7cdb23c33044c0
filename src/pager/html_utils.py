"""Shared HTML utilities for content processing."""

from __future__ import annotations

from pathlib import Path

try:
    from bs4 import BeautifulSoup, ParserRejectedMarkup
    from bs4.element import Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})

_WEB_PREFIXES = ("http://", "https://")
_NON_FILE_PREFIXES = ("http", "data:", "//")
_LINK_SCHEME_PREFIXES = ("http", "mailto:", "tel:", "data:", "//")


def parse_fragment(html: str) -> BeautifulSoup:
    """Parse an HTML fragment without adding html/head/body wrappers.

    Attribute values are kept as plain strings (no ``class``/``rel`` splitting)
    and the first occurrence of a duplicated attribute wins.
    """
    return BeautifulSoup(
        html,
        "html.parser",
        multi_valued_attributes=None,
        on_duplicate_attribute="ignore",
    )


def text_content(tag: Tag) -> str:
    """Concatenate all descendant text nodes in document order."""
    return tag.get_text()


def is_web_url(value: str) -> bool:
    """True for ``http://`` and ``https://`` references."""
    return value.startswith(_WEB_PREFIXES)


def references_file(value: str) -> bool:
    """True when a ``src``/``poster`` value should exist on local disk."""
    return bool(value) and not value.startswith(_NON_FILE_PREFIXES)


def references_local_path(href: str) -> bool:
    """True when a non-anchor link has no scheme and should resolve on disk."""
    return not href.startswith("#") and not href.startswith(_LINK_SCHEME_PREFIXES)


def resolve_local(base_dir: Path, reference: str) -> Path:
    """Resolve a local reference against the content directory.

    Query strings and fragments are dropped, and a leading slash is treated
    as the content directory root.
    """
    path = reference.split("#", 1)[0].split("?", 1)[0]
    return base_dir / path.lstrip("/")
