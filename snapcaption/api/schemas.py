"""
Purpose:
- Pydantic models for request bodies and the rendered item view, so the API is self-documenting.
"""

from __future__ import annotations
from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.state import CAPTION_STYLES, TRANSLATION_LANGUAGES
from ..gemini.parsing import label_emotion
from ..services.sharing import display_caption
from ..store.models import ItemRecord

class CaptionRequest(BaseModel):
    style: Optional[str] = Field(default=None, description="Caption style; defaults to the UI state")
    include_hashtags: Optional[bool] = None

    @field_validator("style")
    @classmethod
    def _known_style(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in CAPTION_STYLES:
            raise ValueError(f"unknown caption style: {v!r}")
        return v

class TranslateRequest(BaseModel):
    language: Optional[str] = Field(default=None, description="Target language; defaults to the UI state")

    @field_validator("language")
    @classmethod
    def _known_language(cls, v: Optional[str]) -> Optional[str]:
        if v and v not in TRANSLATION_LANGUAGES:
            raise ValueError(f"unsupported language: {v!r}")
        return v

class StateUpdate(BaseModel):
    caption_style: Optional[str] = None
    include_hashtags: Optional[bool] = None
    translation_language: Optional[str] = None
    view_mode: Optional[Literal["upload", "camera"]] = None
    theme: Optional[Literal["light", "dark"]] = None

class StatusView(BaseModel):
    in_flight: bool = False
    error: Optional[str] = None

class ItemView(BaseModel):
    id: str
    filename: str
    preview_url: str
    mime_type: str
    width: int
    height: int
    created_at: datetime
    caption: str = ""
    hashtags: str = ""
    display_caption: str = ""
    style: str = ""
    face_emotion: str = ""
    emotion_label: str = ""
    alt_text: str = ""
    translations: Dict[str, str] = {}
    status: Dict[str, StatusView] = {}

    @classmethod
    def from_record(cls, rec: ItemRecord, language: str = "") -> "ItemView":
        current = {lang: t for lang in rec.translations if (t := rec.translation_for(lang))}
        return cls(
            id=rec.item_id,
            filename=rec.filename,
            preview_url=f"/api/v1/previews/{rec.preview}",
            mime_type=rec.image.mime_type,
            width=rec.image.width,
            height=rec.image.height,
            created_at=rec.created_at,
            caption=rec.caption,
            hashtags=rec.hashtags,
            display_caption=display_caption(rec, language),
            style=rec.style,
            face_emotion=rec.face_emotion,
            emotion_label=label_emotion(rec.face_emotion) if rec.face_emotion else "",
            alt_text=rec.alt_text,
            translations=current,
            status={k.value: StatusView(in_flight=s.in_flight, error=s.error) for k, s in rec.status.items()},
        )

class ItemList(BaseModel):
    ok: bool = True
    count: int
    items: List[ItemView] = []
