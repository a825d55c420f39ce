"""
Purpose:
- Per-item actions: upload, list, view, remove, and the five enrichment triggers.
- Copy/share helpers return the text or links; the browser does the clipboard/window work.

Notes:
- Enrichment triggers answer 202 immediately; results show up on the next GET.
- A trigger for an (item, kind) already in flight is refused with 409.
- Routes that mutate the store are `async def`: every store write happens on the event loop thread.
"""

from __future__ import annotations
import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from ..core.errors import SnapCaptionError
from ..core.state import AppContext
from ..media.images import is_image_type, normalize_image
from ..services.sharing import copy_text, share_links
from ..store.models import EnrichmentKind
from .deps import fail, get_ctx
from .schemas import CaptionRequest, ItemList, ItemView, TranslateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/items", tags=["items"])

def _views(ctx: AppContext) -> ItemList:
    lang = ctx.ui.translation_language
    views = [ItemView.from_record(r, lang) for r in ctx.store.items]
    return ItemList(count=len(views), items=views)

@router.get("", response_model=ItemList)
def list_items(ctx: AppContext = Depends(get_ctx)):
    return _views(ctx)

@router.post("")
async def upload(files: List[UploadFile] = File(...), ctx: AppContext = Depends(get_ctx)):
    """
    Accept images from a file picker or drag-drop; each is normalized before it is stored.
    Non-images and undecodable files are skipped and reported.
    """
    cfg = ctx.settings
    accepted = []
    skipped = []
    for f in files:
        name = f.filename or "image"
        if not is_image_type(f.content_type):
            logger.warning("Skipping non-image file: %s (%s)", name, f.content_type)
            skipped.append({"filename": name, "reason": "not-an-image"})
            continue
        raw = await f.read()
        try:
            img = await run_in_threadpool(
                normalize_image, raw, cfg.image_max_width, cfg.image_max_height,
                cfg.image_format, cfg.image_quality,
            )
        except ValueError as e:
            logger.warning("Error processing file %s: %s", name, e)
            skipped.append({"filename": name, "reason": "undecodable"})
            continue
        accepted.append((name, img))

    records = ctx.store.add_many(accepted) if accepted else []
    for rec in records:
        ctx.tracker.dispatch_initial(rec.item_id)

    lang = ctx.ui.translation_language
    return {
        "ok": True,
        "items": [ItemView.from_record(ctx.store.get(r.item_id) or r, lang).model_dump(mode="json") for r in records],
        "skipped": skipped,
    }

@router.get("/{item_id}")
def get_item(item_id: str, ctx: AppContext = Depends(get_ctx)):
    try:
        rec = ctx.store.require(item_id)
    except SnapCaptionError as e:
        return fail(e)
    return {"ok": True, "item": ItemView.from_record(rec, ctx.ui.translation_language).model_dump(mode="json")}

@router.delete("/{item_id}")
async def remove_item(item_id: str, ctx: AppContext = Depends(get_ctx)):
    try:
        rec = ctx.store.remove(item_id)
    except SnapCaptionError as e:
        return fail(e)
    return {"ok": True, "removed": rec.item_id}

def _trigger(ctx: AppContext, item_id: str, kind: EnrichmentKind, **params) -> JSONResponse:
    try:
        started = ctx.tracker.dispatch(item_id, kind, **params)
    except SnapCaptionError as e:
        return fail(e)
    if not started:
        return JSONResponse(status_code=409, content={
            "ok": False, "error": f"{kind.value} already in progress", "item_id": item_id,
        })
    return JSONResponse(status_code=202, content={
        "ok": True, "started": True, "item_id": item_id, "kind": kind.value,
    })

@router.post("/{item_id}/caption")
async def caption(item_id: str, payload: Optional[CaptionRequest] = None, ctx: AppContext = Depends(get_ctx)):
    ui = ctx.ui
    payload = payload or CaptionRequest()
    style = payload.style or ui.caption_style
    hashtags = ui.include_hashtags if payload.include_hashtags is None else payload.include_hashtags
    return _trigger(ctx, item_id, EnrichmentKind.CAPTION, style=style, include_hashtags=hashtags)

@router.post("/{item_id}/style")
async def style(item_id: str, ctx: AppContext = Depends(get_ctx)):
    return _trigger(ctx, item_id, EnrichmentKind.STYLE)

@router.post("/{item_id}/face-emotion")
async def face_emotion(item_id: str, ctx: AppContext = Depends(get_ctx)):
    return _trigger(ctx, item_id, EnrichmentKind.FACE_EMOTION)

@router.post("/{item_id}/alt-text")
async def alt_text(item_id: str, ctx: AppContext = Depends(get_ctx)):
    return _trigger(ctx, item_id, EnrichmentKind.ALT_TEXT)

@router.post("/{item_id}/translate")
async def translate(item_id: str, payload: Optional[TranslateRequest] = None, ctx: AppContext = Depends(get_ctx)):
    language = (payload.language if payload else None) or ctx.ui.translation_language
    if not language:
        return JSONResponse(status_code=400, content={
            "ok": False, "error": "Please select a target language for translation.",
        })
    return _trigger(ctx, item_id, EnrichmentKind.TRANSLATION, language=language)

@router.get("/{item_id}/copy")
def copy(item_id: str, target: Literal["caption", "alt_text"] = "caption", ctx: AppContext = Depends(get_ctx)):
    try:
        rec = ctx.store.require(item_id)
    except SnapCaptionError as e:
        return fail(e)
    specific = rec.alt_text if target == "alt_text" else None
    text = copy_text(rec, ctx.ui.translation_language, specific=specific)
    if not text:
        return JSONResponse(status_code=400, content={"ok": False, "error": "Nothing to copy yet."})
    return {"ok": True, "target": target, "text": text}

@router.get("/{item_id}/share")
def share(item_id: str, ctx: AppContext = Depends(get_ctx)):
    try:
        rec = ctx.store.require(item_id)
    except SnapCaptionError as e:
        return fail(e)
    if not rec.caption:
        return JSONResponse(status_code=400, content={"ok": False, "error": "Generate a caption first."})
    return {"ok": True, "links": share_links(rec, ctx.ui.translation_language)}
