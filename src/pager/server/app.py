"""FastAPI application for the live development server."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from pager.server.routers import live_router
from pager.watch import WatchSession


def create_app(session: WatchSession, *, watch: bool = True) -> FastAPI:
    """Build the application serving ``session.directory``.

    Args:
        session: Watch session shared by the routes and the lifespan.
        watch: If True, the lifespan starts the observer and the debounce
            loop and tears both down on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        task: asyncio.Task[None] | None = None
        if watch:
            session.start()
            task = asyncio.create_task(session.run())
        try:
            yield
        finally:
            if task is not None:
                task.cancel()
                with suppress(asyncio.CancelledError):
                    await task
            session.stop()

    app = FastAPI(lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.session = session
    app.include_router(live_router)
    app.mount("/", StaticFiles(directory=session.directory), name="content")
    return app
