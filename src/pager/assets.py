"""Stylesheet hashing, cache-busting and inlining."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from pathlib import Path

from pager.schemas import SiteConfig

logger = logging.getLogger(__name__)

_HASH_LENGTH = 8
_CHUNK_SIZE = 64 * 1024


@dataclass
class StylesheetPlan:
    """How stylesheets appear in the rendered page.

    Attributes:
        links: References emitted as ``<link rel="stylesheet">``.
        inline: Stylesheet bodies emitted as ``<style>`` blocks.
    """

    links: list[str] = field(default_factory=list)
    inline: list[str] = field(default_factory=list)


def hash_file(path: Path) -> str:
    """Return the first eight hex digits of the file's SHA-256."""
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()[:_HASH_LENGTH]


def plan_stylesheets(config: SiteConfig, directory: Path, *, production: bool = False) -> StylesheetPlan:
    """Decide which stylesheets are linked, inlined, versioned or hashed.

    Args:
        config: Site configuration.
        directory: Content directory stylesheet paths are relative to.
        production: If True, local stylesheets are copied to content-hashed
            file names; otherwise a ``?v=<hash>`` query is appended.
    """
    plan = StylesheetPlan()
    refs = list(config.css)

    if config.inline_css:
        for stylesheet in config.css:
            if _is_remote(stylesheet):
                continue
            try:
                plan.inline.append((directory / stylesheet).read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError):
                logger.warning("could not read CSS for inlining: %s", stylesheet)
        refs = [stylesheet for stylesheet in config.css if _is_remote(stylesheet)]

    for stylesheet in refs:
        if _is_remote(stylesheet):
            plan.links.append(stylesheet)
        elif production:
            plan.links.append(_write_hashed_copy(stylesheet, directory))
        else:
            plan.links.append(_versioned(stylesheet, directory))
    return plan


def _versioned(stylesheet: str, directory: Path) -> str:
    try:
        return f"{stylesheet}?v={hash_file(directory / stylesheet)}"
    except OSError:
        return stylesheet


def _write_hashed_copy(stylesheet: str, directory: Path) -> str:
    source = directory / stylesheet
    try:
        data = source.read_bytes()
        digest = hashlib.sha256(data).hexdigest()[:_HASH_LENGTH]
        relative = Path(stylesheet)
        hashed = relative.with_name(f"{relative.stem}.{digest}{relative.suffix}")
        (directory / hashed).write_bytes(data)
    except OSError:
        return stylesheet
    return hashed.as_posix()


def _is_remote(reference: str) -> bool:
    return reference.startswith("http")
