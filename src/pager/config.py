"""Local configuration for pager."""

from __future__ import annotations

import os


DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_PORT_ATTEMPTS = 50
DEFAULT_DEBOUNCE_MS = 300

CONFIG_FILENAME = "pager.yaml"
CONTENT_FILENAME = "content.html"
OUTPUT_FILENAME = "index.html"
MARKDOWN_FILENAME = "index.md"
GENERATED_FILENAMES = frozenset({OUTPUT_FILENAME, MARKDOWN_FILENAME})

RELOAD_PATH = "/_reload"

TITLE_MAX_LENGTH = 60
DESCRIPTION_MAX_LENGTH = 160

PAGER_HOST = os.getenv("PAGER_HOST", DEFAULT_HOST)
PAGER_PORT = int(os.getenv("PAGER_PORT", str(DEFAULT_PORT)))
PAGER_PORT_ATTEMPTS = int(os.getenv("PAGER_PORT_ATTEMPTS", str(DEFAULT_PORT_ATTEMPTS)))
# Quiet period after the last filesystem event before a rebuild starts.
PAGER_DEBOUNCE_MS = int(os.getenv("PAGER_DEBOUNCE_MS", str(DEFAULT_DEBOUNCE_MS)))
