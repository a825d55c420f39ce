# Common language: Environment/ops probe that surfaces version pins, config, and live counts.
# Use this before/after upgrades to confirm no silent drift.

from fastapi import APIRouter, Depends
from ..core.state import AppContext
from .deps import get_ctx
import sys, importlib

router = APIRouter(tags=["health"])

def _ver(modname: str) -> str:
    try:
        m = importlib.import_module(modname)
        return getattr(m, "__version__", "unknown")
    except ImportError:
        return "not-installed"

@router.get("/healthz")
def healthz(ctx: AppContext = Depends(get_ctx)):
    cfg = ctx.settings
    return {
        "status": "ok",
        "python": sys.version.split()[0],
        "versions": {
            "fastapi": _ver("fastapi"),
            "uvicorn": _ver("uvicorn"),
            "pydantic_settings": _ver("pydantic_settings"),
            "httpx": _ver("httpx"),
            "PIL": _ver("PIL"),
            "numpy": _ver("numpy"),
            "cv2": _ver("cv2"),
            "reportlab": _ver("reportlab"),
        },
        "config": {
            "gemini_model": cfg.gemini_model,
            "image_bounds": [cfg.image_max_width, cfg.image_max_height],
            "image_format": cfg.image_format,
            "preferences_file": str(cfg.preferences_file),
        },
        "env_keys_present": {
            "SNAPCAPTION_GEMINI_API_KEY": bool(cfg.gemini_api_key),
        },
        "items": len(ctx.store),
        "pending_enrichments": ctx.tracker.pending,
        "camera": ctx.capture.snapshot()["state"],
    }
