"""Validation of local links collected from the content fragment."""

from __future__ import annotations

import logging
from collections.abc import Container, Iterable
from pathlib import Path

from pager.html_utils import references_local_path, resolve_local

logger = logging.getLogger(__name__)


def validate_links(links: Iterable[str], ids: Container[str], base_dir: Path) -> list[str]:
    """Warn about in-page anchors and local files that do not exist.

    Args:
        links: Local ``href`` values in document order.
        ids: Ids assigned during the same pass.
        base_dir: Directory local paths are resolved against.

    Returns:
        The warning messages that were logged, in link order.
    """
    problems: list[str] = []
    for link in links:
        if link.startswith("#"):
            if link[1:] not in ids:
                problems.append(f'<a href="{link}"> references missing id')
        elif references_local_path(link) and not resolve_local(base_dir, link).exists():
            problems.append(f'<a href="{link}"> references missing file')

    for message in problems:
        logger.warning(message)
    return problems
