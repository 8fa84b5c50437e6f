"""
Acme Ice Cream API: Landing Page Route
=======================================

What:  Serves the packaged static/index.html at the root path.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

router = APIRouter(tags=["Landing"])

INDEX_HTML = Path(__file__).resolve().parent.parent / "static" / "index.html"


@router.get("/", include_in_schema=False)
async def index() -> FileResponse:
    """Return the landing page. A missing file is a deployment error (→ 500)."""
    return FileResponse(path=str(INDEX_HTML), media_type="text/html")
