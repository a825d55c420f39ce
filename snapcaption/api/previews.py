"""
Purpose:
- Serve preview bytes by handle (the "preview URL" in every item view).
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response

from ..core.state import AppContext
from .deps import get_ctx

router = APIRouter(prefix="/api/v1/previews", tags=["previews"])

@router.get("/{handle}")
def preview(handle: str, ctx: AppContext = Depends(get_ctx)):
    blob = ctx.previews.get(handle)
    if blob is None:
        return JSONResponse(status_code=404, content={"ok": False, "error": "preview released or unknown"})
    data, mime = blob
    return Response(content=data, media_type=mime, headers={"Cache-Control": "private, max-age=3600"})
