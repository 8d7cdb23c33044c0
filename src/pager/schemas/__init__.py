"""Shared schemas for pager."""

from pager.schemas.build import BuildResult
from pager.schemas.config import SiteConfig
from pager.schemas.content import Heading

__all__ = ["BuildResult", "Heading", "SiteConfig"]
