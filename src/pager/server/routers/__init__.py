"""HTTP routers for the development server."""

from pager.server.routers.live import router as live_router

__all__ = ["live_router"]
