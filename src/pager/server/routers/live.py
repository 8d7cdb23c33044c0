"""Live page and reload stream endpoints."""

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import HTMLResponse, StreamingResponse

from pager.config import OUTPUT_FILENAME, RELOAD_PATH
from pager.reload import stream_reload_events

router = APIRouter()

LIVE_RELOAD_SCRIPT = f'<script>new EventSource("{RELOAD_PATH}").onmessage=()=>location.reload()</script>'


def inject_reload_script(page: str) -> str:
    """Insert the live-reload listener before the first ``</body>``."""
    return page.replace("</body>", LIVE_RELOAD_SCRIPT + "\n  </body>", 1)


@router.get("/", response_class=HTMLResponse)
@router.get(f"/{OUTPUT_FILENAME}", response_class=HTMLResponse)
async def live_page(request: Request) -> HTMLResponse:
    """Serve the generated page with the live-reload script injected.

    **Raises**

    - **HTTPException**: **404** - the page has not been built yet
    """
    session = request.app.state.session
    page_path = session.directory / OUTPUT_FILENAME
    try:
        page = page_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{OUTPUT_FILENAME} has not been built",
        ) from exc
    return HTMLResponse(inject_reload_script(page))


@router.get(RELOAD_PATH)
async def reload_stream(request: Request) -> StreamingResponse:
    """Push ``data: reload`` events to the browser after every rebuild.

    The listener is removed from the registry when the client disconnects.
    """
    session = request.app.state.session
    return StreamingResponse(
        stream_reload_events(session.registry),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
