"""Logging configuration for pager entry points."""

from __future__ import annotations

import logging
import sys

_LEVEL_COLORS = {
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[31m",
}
_RESET = "\033[0m"
_FORMAT = "%(asctime)s %(levelname)s %(message)s"
_DATE_FORMAT = "%H:%M:%S"


class _ColorFormatter(logging.Formatter):
    """Colors the level name of warnings and errors."""

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        original = record.levelname
        record.levelname = f"{color}{original}{_RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def configure_logging(*, verbose: bool = False) -> None:
    """Send pager and uvicorn records to stderr.

    Colors are only used when stderr is a terminal.
    """
    handler = logging.StreamHandler(sys.stderr)
    formatter_class = _ColorFormatter if sys.stderr.isatty() else logging.Formatter
    handler.setFormatter(formatter_class(_FORMAT, datefmt=_DATE_FORMAT))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("pager").setLevel(logging.DEBUG if verbose else logging.INFO)
    logging.getLogger("uvicorn").setLevel(logging.INFO if verbose else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger."""
    return logging.getLogger(name)
