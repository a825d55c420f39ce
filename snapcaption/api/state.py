"""
Purpose:
- Read/write the global UI state (caption style, hashtags, translation language, view, theme).
- Writes run on the event loop (async route), never in the threadpool.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..core.state import AppContext, CAPTION_STYLES, TRANSLATION_LANGUAGES
from .deps import get_ctx
from .schemas import StateUpdate

router = APIRouter(prefix="/api/v1/state", tags=["state"])

@router.get("")
def read_state(ctx: AppContext = Depends(get_ctx)):
    return {
        "ok": True,
        "state": ctx.ui.model_dump(),
        "options": {"caption_styles": CAPTION_STYLES, "languages": TRANSLATION_LANGUAGES},
    }

@router.put("")
async def write_state(payload: StateUpdate, ctx: AppContext = Depends(get_ctx)):
    try:
        ui = ctx.update_ui(**payload.model_dump(exclude_unset=True))
    except ValidationError as e:
        return JSONResponse(status_code=422, content={"ok": False, "error": str(e)})
    return {"ok": True, "state": ui.model_dump()}
