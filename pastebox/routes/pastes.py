"""
Paste routes.
Handles create, fetch (API), and view (HTML) operations.
"""
import html

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from pastebox.config import settings
from pastebox.dependencies import get_now, get_paste_service
from pastebox.errors import NotFoundError
from pastebox.models import PasteCreate, PasteResponse, PasteView
from pastebox.service import PasteService

router = APIRouter()


def _base_url(request: Request) -> str:
    """Configured APP_DOMAIN, else the scheme and host the client used."""
    if settings.APP_DOMAIN:
        return settings.APP_DOMAIN.rstrip("/")

    protocol = request.headers.get("x-forwarded-proto", "http")
    host = request.headers.get("host", "localhost:8000")
    return f"{protocol}://{host}"


@router.post("/api/pastes", response_model=PasteResponse, status_code=201)
async def create_paste(
    paste: PasteCreate,
    request: Request,
    service: PasteService = Depends(get_paste_service),
    now: int = Depends(get_now),
) -> PasteResponse:
    """
    Create a new paste.

    Args:
        paste: Paste data (content, optional ttl_seconds, optional max_views)
        request: HTTP request context

    Returns:
        Paste ID and shareable URL
    """
    stored = service.create_paste(
        content=paste.content,
        ttl_seconds=paste.ttl_seconds,
        max_views=paste.max_views,
        now=now,
    )

    url = f"{_base_url(request)}/p/{stored.id}"
    return PasteResponse(id=stored.id, url=url)


@router.get("/api/pastes/{paste_id}", response_model=PasteView)
async def fetch_paste(
    paste_id: str,
    service: PasteService = Depends(get_paste_service),
    now: int = Depends(get_now),
) -> PasteView:
    """
    Fetch a paste (API endpoint).
    Each fetch increments the view count; unavailable pastes give 404.
    """
    return service.fetch_paste(paste_id, now=now)


@router.get("/p/{paste_id}", response_class=HTMLResponse)
async def view_paste(
    paste_id: str,
    service: PasteService = Depends(get_paste_service),
    now: int = Depends(get_now),
) -> HTMLResponse:
    """
    View a paste as HTML.
    Each view increments the view count.
    """
    try:
        view = service.fetch_paste(paste_id, now=now)
    except NotFoundError:
        return HTMLResponse(_NOT_FOUND_PAGE, status_code=404)

    return HTMLResponse(
        _PASTE_PAGE.format(
            paste_id=html.escape(paste_id),
            content=html.escape(view.content),
        )
    )


_PASTE_PAGE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Paste - Pastebox</title>
</head>
<body>
    <h1>Paste</h1>
    <div class="paste-id">ID: {paste_id}</div>
    <pre class="content">{content}</pre>
</body>
</html>"""

_NOT_FOUND_PAGE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Not Found - Pastebox</title>
</head>
<body>
    <h1>404</h1>
    <p>This paste was not found, has expired, or its view limit has been exceeded.</p>
</body>
</html>"""
