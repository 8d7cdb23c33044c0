"""Custom exceptions for pager."""


class PagerError(Exception):
    """Base exception for pager operations."""


class BuildError(PagerError):
    """A build was aborted; previously generated output is left in place."""


class ConfigError(BuildError):
    """The site configuration file is missing or malformed."""


class TemplateRenderError(BuildError):
    """The page template could not be rendered."""


class WatchError(PagerError):
    """The filesystem watcher could not be started."""


class ServeError(PagerError):
    """The development server could not be started."""
