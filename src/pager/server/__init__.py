"""Live development server."""

from pager.server.app import create_app
from pager.server.runner import find_open_port, run_server

__all__ = ["create_app", "find_open_port", "run_server"]
