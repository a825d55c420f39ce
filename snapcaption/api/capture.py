"""
Purpose:
- Camera capture endpoints over media.capture.CaptureSession.
- Device calls run in the threadpool; confirm() feeds the still through the normal upload path.
"""

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from ..core.errors import SnapCaptionError
from ..core.state import AppContext
from ..media.images import normalize_image
from .deps import fail, get_ctx
from .schemas import ItemView

router = APIRouter(prefix="/api/v1/capture", tags=["capture"])

async def _step(fn):
    try:
        snap = await run_in_threadpool(fn)
    except SnapCaptionError as e:
        return fail(e)
    return {"ok": True, "camera": snap}

@router.get("")
def state(ctx: AppContext = Depends(get_ctx)):
    return {"ok": True, "camera": ctx.capture.snapshot()}

@router.post("/start")
async def start(ctx: AppContext = Depends(get_ctx)):
    return await _step(ctx.capture.start)

@router.post("/capture")
async def capture(ctx: AppContext = Depends(get_ctx)):
    return await _step(ctx.capture.capture)

@router.post("/retake")
async def retake(ctx: AppContext = Depends(get_ctx)):
    return await _step(ctx.capture.retake)

@router.post("/stop")
async def stop(ctx: AppContext = Depends(get_ctx)):
    return await _step(ctx.capture.stop)

@router.post("/switch")
async def switch(ctx: AppContext = Depends(get_ctx)):
    return await _step(ctx.capture.switch_facing)

@router.post("/confirm")
async def confirm(ctx: AppContext = Depends(get_ctx)):
    cfg = ctx.settings
    try:
        still = await run_in_threadpool(ctx.capture.confirm)
        img = await run_in_threadpool(
            normalize_image, still.data, cfg.image_max_width, cfg.image_max_height,
            cfg.image_format, cfg.image_quality,
        )
    except SnapCaptionError as e:
        return fail(e)
    rec = ctx.store.add(still.filename, img)
    ctx.tracker.dispatch_initial(rec.item_id)
    view = ItemView.from_record(ctx.store.get(rec.item_id) or rec, ctx.ui.translation_language)
    return {"ok": True, "item": view.model_dump(mode="json"), "camera": ctx.capture.snapshot()}

@router.get("/preview")
async def preview(ctx: AppContext = Depends(get_ctx)):
    frame = await run_in_threadpool(ctx.capture.preview)
    if frame is None:
        return JSONResponse(status_code=404, content={"ok": False, "error": "no frame available"})
    return Response(content=frame, media_type="image/jpeg")
