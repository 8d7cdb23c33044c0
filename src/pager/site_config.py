"""Load and check ``pager.yaml``."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from pager.config import CONFIG_FILENAME, DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH
from pager.exceptions import ConfigError
from pager.macros import syntax_theme_css
from pager.schemas import SiteConfig

logger = logging.getLogger(__name__)


def load_site_config(directory: Path) -> SiteConfig:
    """Read and validate the site configuration in ``directory``.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, is not a
            mapping, or holds values of the wrong type.
    """
    path = directory / CONFIG_FILENAME
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"{CONFIG_FILENAME}: {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"{CONFIG_FILENAME}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME}: expected a mapping of settings")

    try:
        config = SiteConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"{CONFIG_FILENAME}: {exc}") from exc

    for key in config.unknown_fields:
        logger.warning("unknown field '%s' in %s", key, CONFIG_FILENAME)
    return config


def check_site_config(config: SiteConfig, directory: Path) -> list[str]:
    """Log warnings for incomplete or inconsistent settings.

    Returns:
        The warning messages that were logged.
    """
    problems: list[str] = []

    for name in ("title", "description", "domain"):
        if not getattr(config, name):
            problems.append(f"missing '{name}' in {CONFIG_FILENAME}")

    if len(config.title) > TITLE_MAX_LENGTH:
        problems.append(f"title exceeds {TITLE_MAX_LENGTH} characters ({len(config.title)})")
    if len(config.description) > DESCRIPTION_MAX_LENGTH:
        problems.append(
            f"description exceeds {DESCRIPTION_MAX_LENGTH} characters ({len(config.description)})"
        )

    if _is_missing_local(config.favicon, directory):
        problems.append(f"favicon file not found: {config.favicon}")
    if _is_missing_local(config.card, directory):
        problems.append(f"card image not found: {config.card}")
    for stylesheet in config.css:
        if _is_missing_local(stylesheet, directory):
            problems.append(f"CSS file not found: {stylesheet}")

    if config.syntax_theme and not syntax_theme_css(config.syntax_theme):
        problems.append(f"unknown syntax_theme '{config.syntax_theme}'")

    for message in problems:
        logger.warning(message)
    return problems


def _is_missing_local(reference: str, directory: Path) -> bool:
    if not reference or reference.startswith("http"):
        return False
    return not (directory / reference).exists()
