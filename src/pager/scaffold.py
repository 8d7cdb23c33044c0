"""Create a new site from the packaged starter files."""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path

from pager.exceptions import PagerError

logger = logging.getLogger(__name__)

STARTER_PACKAGE = "pager"
STARTER_DIR = "starter"


def new_site(target: Path) -> list[Path]:
    """Copy the starter files into ``target``, creating it if needed.

    Existing files are never overwritten.

    Returns:
        The files that were written.

    Raises:
        PagerError: If ``target`` exists and is not a directory, or cannot be written.
    """
    if target.exists() and not target.is_dir():
        raise PagerError(f"{target} exists and is not a directory")

    written: list[Path] = []
    try:
        target.mkdir(parents=True, exist_ok=True)
        starter = resources.files(STARTER_PACKAGE).joinpath(STARTER_DIR)
        for entry in sorted(starter.iterdir(), key=lambda item: item.name):
            if not entry.is_file():
                continue
            destination = target / entry.name
            if destination.exists():
                logger.warning("%s already exists, leaving it unchanged", destination)
                continue
            destination.write_bytes(entry.read_bytes())
            written.append(destination)
    except OSError as exc:
        raise PagerError(f"could not create {target}: {exc}") from exc

    logger.info("Created %s/", target)
    return written
