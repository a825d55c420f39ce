"""
Purpose:
- Item record: per-image bundle of enrichment results plus per-kind in-flight/error status.
- Actions consumed by the reducer in store/items.py.

Notes:
- Records are frozen; every change produces a new record (dataclasses.replace).
- Each enrichment kind owns a fixed set of fields (KIND_FIELDS); nothing else may touch them.
"""

from __future__ import annotations
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..media.images import EncodedImage

NOT_AVAILABLE = "N/A"

class EnrichmentKind(str, Enum):
    CAPTION = "caption"
    STYLE = "style"
    FACE_EMOTION = "face_emotion"
    ALT_TEXT = "alt_text"
    TRANSLATION = "translation"

KIND_FIELDS: Dict[EnrichmentKind, Tuple[str, ...]] = {
    EnrichmentKind.CAPTION: ("caption", "hashtags"),
    EnrichmentKind.STYLE: ("style",),
    EnrichmentKind.FACE_EMOTION: ("face_emotion",),
    EnrichmentKind.ALT_TEXT: ("alt_text",),
    EnrichmentKind.TRANSLATION: ("translations",),
}

@dataclass(frozen=True)
class EnrichmentStatus:
    in_flight: bool = False
    error: Optional[str] = None

@dataclass(frozen=True)
class Translation:
    source: str     # caption text this was translated from
    text: str

def _idle_status() -> Dict[EnrichmentKind, EnrichmentStatus]:
    return {kind: EnrichmentStatus() for kind in EnrichmentKind}

@dataclass(frozen=True)
class ItemRecord:
    item_id: str
    filename: str
    image: EncodedImage
    preview: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    caption: str = ""
    hashtags: str = ""
    style: str = ""
    face_emotion: str = ""
    alt_text: str = ""
    translations: Mapping[str, Translation] = field(default_factory=dict)
    status: Mapping[EnrichmentKind, EnrichmentStatus] = field(default_factory=_idle_status)

    @classmethod
    def new(cls, filename: str, image: EncodedImage, preview: str) -> "ItemRecord":
        return cls(item_id=uuid.uuid4().hex, filename=filename, image=image, preview=preview)

    def status_of(self, kind: EnrichmentKind) -> EnrichmentStatus:
        return self.status.get(kind, EnrichmentStatus())

    def in_flight(self, kind: EnrichmentKind) -> bool:
        return self.status_of(kind).in_flight

    def error_of(self, kind: EnrichmentKind) -> Optional[str]:
        return self.status_of(kind).error

    def translation_for(self, language: str) -> Optional[str]:
        """Translated caption for language, only if it was made from the current caption."""
        if not language:
            return None
        tr = self.translations.get(language)
        if tr is None or not tr.text or tr.source != self.caption:
            return None
        return tr.text

# --- Actions -----------------------------------------------------------------

@dataclass(frozen=True)
class Add:
    records: Tuple[ItemRecord, ...]

@dataclass(frozen=True)
class Remove:
    item_id: str

@dataclass(frozen=True)
class Begin:
    item_id: str
    kind: EnrichmentKind

@dataclass(frozen=True)
class Resolve:
    item_id: str
    kind: EnrichmentKind
    fields: Mapping[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

Action = Union[Add, Remove, Begin, Resolve]
