"""pager: build a single static page from a content fragment and serve it with live reload."""

from pager.build import build_site
from pager.exceptions import (
    BuildError,
    ConfigError,
    PagerError,
    ServeError,
    TemplateRenderError,
    WatchError,
)
from pager.ids import IdentifierRegistry, slugify
from pager.pipeline import process_content
from pager.reload import ReloadRegistry
from pager.schemas import BuildResult, Heading, SiteConfig
from pager.toc import build_toc

__version__ = "0.1.0"

__all__ = [
    "BuildError",
    "BuildResult",
    "ConfigError",
    "Heading",
    "IdentifierRegistry",
    "PagerError",
    "ReloadRegistry",
    "ServeError",
    "SiteConfig",
    "TemplateRenderError",
    "WatchError",
    "__version__",
    "build_site",
    "build_toc",
    "process_content",
    "slugify",
]
