"""
Purpose:
- Root context object (AppContext) owning everything with app lifetime: settings,
  item store, preview registry, Gemini client, enrichment tracker, capture session,
  and the global UI state.
- UI state is read as a copy and written only through AppContext.update_ui().
- The theme is the one durable preference (JSON file at settings.preferences_file).
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, field_validator

from .settings import Settings

logger = logging.getLogger(__name__)

CAPTION_STYLES = [
    "detailed and creative",
    "short and punchy",
    "funny",
    "poetic",
    "professional",
    "sarcastic",
    "inspirational",
    "witty",
    "informational",
    "minimalist",
]

TRANSLATION_LANGUAGES = [
    "Hindi",
    "Telugu",
    "Spanish",
    "French",
    "German",
    "Japanese",
    "Chinese (Simplified)",
]

class UIState(BaseModel):
    caption_style: str = "detailed and creative"
    include_hashtags: bool = False
    translation_language: str = ""          # "" = no translation
    view_mode: Literal["upload", "camera"] = "upload"
    theme: Literal["light", "dark"] = "light"

    @field_validator("caption_style")
    @classmethod
    def _known_style(cls, v: str) -> str:
        if v not in CAPTION_STYLES:
            raise ValueError(f"unknown caption style: {v!r}")
        return v

    @field_validator("translation_language")
    @classmethod
    def _known_language(cls, v: str) -> str:
        if v and v not in TRANSLATION_LANGUAGES:
            raise ValueError(f"unsupported language: {v!r}")
        return v

def load_theme(path: Path) -> str:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return "light"
    theme = data.get("theme") if isinstance(data, dict) else None
    return "dark" if theme == "dark" else "light"

def save_theme(path: Path, theme: str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"theme": theme}), encoding="utf-8")

class AppContext:
    def __init__(self, cfg: Settings, *, store, previews, client, tracker, capture):
        self.settings = cfg
        self.store = store
        self.previews = previews
        self.client = client
        self.tracker = tracker
        self.capture = capture
        self._ui = UIState(theme=load_theme(cfg.preferences_file))

    @property
    def ui(self) -> UIState:
        return self._ui.model_copy()

    def update_ui(self, **changes) -> UIState:
        """Validate and apply a partial update; persists the theme when it changes."""
        changes = {k: v for k, v in changes.items() if v is not None}
        merged = UIState.model_validate({**self._ui.model_dump(), **changes})
        if merged.theme != self._ui.theme:
            try:
                save_theme(self.settings.preferences_file, merged.theme)
            except OSError as e:
                logger.warning("Could not persist theme: %r", e)
        self._ui = merged
        return self.ui

    async def aclose(self) -> None:
        """Whole-app teardown: stop background work, camera, previews, HTTP client."""
        await self.tracker.shutdown()
        self.capture.close()
        released = self.store.clear()
        await self.client.aclose()
        logger.info("Shutdown complete; released %d preview(s)", released)

def build_context(cfg: Settings, *, http=None, device_factory=None) -> AppContext:
    from ..gemini.client import GeminiClient
    from ..media.capture import CaptureSession, OpenCVCamera
    from ..media.previews import PreviewRegistry
    from ..services.enrichment import EnrichmentTracker
    from ..store.items import ItemStore

    previews = PreviewRegistry()
    store = ItemStore(previews)
    client = GeminiClient(cfg, http=http)
    tracker = EnrichmentTracker(store, client, cfg)
    capture = CaptureSession(
        device_factory or OpenCVCamera,
        user_index=cfg.camera_user_index,
        environment_index=cfg.camera_environment_index,
        width=cfg.camera_width,
        height=cfg.camera_height,
        quality=cfg.capture_quality,
    )
    return AppContext(cfg, store=store, previews=previews, client=client, tracker=tracker, capture=capture)
