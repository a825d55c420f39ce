"""
Purpose:
- Bulk actions over the whole collection: generate all captions, translate all, export PDF.
- Generate/translate await every dispatched item and report each outcome individually.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from ..core.errors import SnapCaptionError
from ..core.state import AppContext
from ..services.bulk import generate_all, translate_all
from ..services.export import export_pdf
from .deps import fail, get_ctx
from .schemas import CaptionRequest, TranslateRequest

router = APIRouter(prefix="/api/v1/bulk", tags=["bulk"])

@router.post("/generate")
async def generate(payload: Optional[CaptionRequest] = None, ctx: AppContext = Depends(get_ctx)):
    ui = ctx.ui
    payload = payload or CaptionRequest()
    style = payload.style or ui.caption_style
    hashtags = ui.include_hashtags if payload.include_hashtags is None else payload.include_hashtags
    try:
        report = await generate_all(ctx.tracker, style, hashtags)
    except SnapCaptionError as e:
        return fail(e)
    return report.as_dict()

@router.post("/translate")
async def translate(payload: Optional[TranslateRequest] = None, ctx: AppContext = Depends(get_ctx)):
    language = (payload.language if payload else None) or ctx.ui.translation_language
    try:
        report = await translate_all(ctx.tracker, language)
    except SnapCaptionError as e:
        return fail(e)
    return report.as_dict()

@router.get("/export")
async def export(ctx: AppContext = Depends(get_ctx)):
    """
    Download every item as a paginated PDF caption sheet.
    Captions use the selected translation language when a current translation exists.
    """
    try:
        pdf = await run_in_threadpool(export_pdf, ctx.store.items, ctx.ui.translation_language)
    except SnapCaptionError as e:
        return fail(e)
    return Response(
        content=pdf.data,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{pdf.filename}"',
            "X-Page-Count": str(pdf.pages),
        },
    )
