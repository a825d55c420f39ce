"""
Purpose:
- FastAPI application factory and router mounts.
- Builds the AppContext on startup and tears it down (previews, camera, HTTP client) on shutdown.
- Uvicorn will serve this on 0.0.0.0:8000 by default.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .core.logging import setup_logging
from .core.settings import Settings, settings as default_settings
from .core.state import AppContext, build_context
from .api.health import router as health_router
from .api.state import router as state_router
from .api.items import router as items_router
from .api.previews import router as previews_router
from .api.bulk import router as bulk_router
from .api.capture import router as capture_router

def create_app(cfg: Optional[Settings] = None, ctx: Optional[AppContext] = None) -> FastAPI:
    cfg = cfg or (ctx.settings if ctx else default_settings)
    setup_logging(cfg.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.ctx = ctx or build_context(cfg)
        yield
        await app.state.ctx.aclose()

    app = FastAPI(title="SnapCaption API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(health_router)
    app.include_router(state_router)
    app.include_router(items_router)
    app.include_router(previews_router)
    app.include_router(bulk_router)
    app.include_router(capture_router)
    return app

app = create_app()
