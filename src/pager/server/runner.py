"""Start the development server."""

from __future__ import annotations

import socket
import webbrowser
from pathlib import Path

import uvicorn

from pager.build import build_site
from pager.config import OUTPUT_FILENAME, PAGER_HOST, PAGER_PORT, PAGER_PORT_ATTEMPTS
from pager.exceptions import ServeError
from pager.server.app import create_app
from pager.utils.logging_config import get_logger
from pager.watch import WatchSession

logger = get_logger(__name__)


def find_open_port(host: str, port: int, attempts: int = PAGER_PORT_ATTEMPTS) -> int:
    """Return the first port from ``port`` upwards that can be bound.

    Raises:
        ServeError: If none of ``attempts`` consecutive ports is free.
    """
    for candidate in range(port, port + attempts):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
            try:
                probe.bind((host, candidate))
            except OSError:
                continue
        return candidate
    raise ServeError(f"could not find an open port after {attempts} attempts")


def run_server(
    directory: Path,
    *,
    host: str = PAGER_HOST,
    port: int = PAGER_PORT,
    open_browser: bool = True,
) -> None:
    """Build once, then serve ``directory`` with rebuild-on-change and live reload.

    Raises:
        BuildError: If the initial build fails.
        ServeError: If no port can be bound.
    """
    directory = directory.resolve()
    build_site(directory)
    logger.info("Built %s", OUTPUT_FILENAME)

    port = find_open_port(host, port)
    session = WatchSession(directory)
    app = create_app(session)

    url = f"http://localhost:{port}"
    logger.info("Serving at %s", url)
    if open_browser:
        webbrowser.open(url)

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_config=None,  # Keep uvicorn on the root logging configuration
        timeout_graceful_shutdown=1,
    )
