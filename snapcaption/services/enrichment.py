"""
Purpose:
- Per-item enrichment tracker: for one (item, kind) pair, set the in-flight flag,
  call Gemini, then store either the result or an error string.
- Touches only the fields that kind owns; other kinds and other items are left alone.

Design:
- begin() is synchronous: the busy check and the Begin action happen with no await
  in between, so a second trigger for the same (item, kind) is refused ("busy").
- dispatch() is fire-and-forget (asyncio task); run() is the awaitable form used by bulk ops.
- Failures never propagate: anything unexpected becomes the fixed per-kind message.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Any, Dict, Optional, Set, Tuple

from ..core.errors import ItemNotFound
from ..core.settings import Settings
from ..gemini.client import GeminiClient
from ..store.items import ItemStore
from ..store.models import Begin, EnrichmentKind, ItemRecord, NOT_AVAILABLE, Resolve, Translation
from . import inference

logger = logging.getLogger(__name__)

DONE = "done"
BUSY = "busy"
MISSING = "missing"

FALLBACK_ERRORS = {
    EnrichmentKind.CAPTION: "Failed to generate caption.",
    EnrichmentKind.STYLE: "Failed to recognize style.",
    EnrichmentKind.FACE_EMOTION: "Failed to analyze face/emotion.",
    EnrichmentKind.ALT_TEXT: "Failed to generate alt-text.",
    EnrichmentKind.TRANSLATION: "Failed to translate.",
}

Outcome = Tuple[Dict[str, Any], Optional[str]]

class EnrichmentTracker:
    def __init__(self, store: ItemStore, client: GeminiClient, cfg: Settings):
        self.store = store
        self.client = client
        self.cfg = cfg
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def begin(self, item_id: str, kind: EnrichmentKind) -> Optional[ItemRecord]:
        """
        Mark (item, kind) in flight and return the record as it was before.
        None if already in flight; raises ItemNotFound for unknown ids.
        """
        rec = self.store.require(item_id)
        if rec.in_flight(kind):
            logger.info("%s already in flight for %s; ignoring trigger", kind.value, item_id)
            return None
        self.store.dispatch(Begin(item_id, kind))
        return rec

    async def _call(self, rec: ItemRecord, kind: EnrichmentKind, params: Dict[str, Any]) -> Outcome:
        if kind is EnrichmentKind.CAPTION:
            r = await inference.generate_caption(
                self.client, rec.image, params["style"], params["include_hashtags"]
            )
            if r.error:
                return {}, r.error
            return {"caption": r.caption, "hashtags": r.hashtags}, None

        if kind is EnrichmentKind.TRANSLATION:
            language = params["language"]
            r = await inference.translate_text(self.client, rec.caption, language)
            if r.error:
                return {}, r.error
            return {"translations": {language: Translation(source=rec.caption, text=r.text)}}, None

        if kind is EnrichmentKind.STYLE:
            r = await inference.recognize_style(self.client, rec.image)
            field = "style"
        elif kind is EnrichmentKind.FACE_EMOTION:
            r = await inference.analyze_face_emotion(self.client, rec.image)
            field = "face_emotion"
        else:
            r = await inference.generate_alt_text(self.client, rec.image, self.cfg.alt_text_max_chars)
            field = "alt_text"
        if r.error:
            return {}, r.error
        return {field: r.text or NOT_AVAILABLE}, None

    async def complete(self, rec: ItemRecord, kind: EnrichmentKind, params: Dict[str, Any]) -> None:
        try:
            fields, error = await self._call(rec, kind, params)
        except Exception:
            logger.exception("Unexpected %s failure for %s", kind.value, rec.item_id)
            fields, error = {}, FALLBACK_ERRORS[kind]
        if error:
            logger.warning("%s failed for %s: %s", kind.value, rec.item_id, error)
        self.store.dispatch(Resolve(rec.item_id, kind, fields, error))

    def _params(self, kind: EnrichmentKind, style: Optional[str], include_hashtags: bool,
                language: Optional[str]) -> Dict[str, Any]:
        if kind is EnrichmentKind.CAPTION:
            return {"style": style or "detailed and creative", "include_hashtags": bool(include_hashtags)}
        if kind is EnrichmentKind.TRANSLATION:
            if not language:
                raise ValueError("translation needs a target language")
            return {"language": language}
        return {}

    async def run(self, item_id: str, kind: EnrichmentKind, *, style: Optional[str] = None,
                  include_hashtags: bool = False, language: Optional[str] = None) -> str:
        params = self._params(kind, style, include_hashtags, language)
        try:
            rec = self.begin(item_id, kind)
        except ItemNotFound:
            return MISSING
        if rec is None:
            return BUSY
        await self.complete(rec, kind, params)
        return DONE

    def dispatch(self, item_id: str, kind: EnrichmentKind, *, style: Optional[str] = None,
                 include_hashtags: bool = False, language: Optional[str] = None) -> bool:
        """Start the enrichment in the background. False if (item, kind) is busy."""
        params = self._params(kind, style, include_hashtags, language)
        rec = self.begin(item_id, kind)
        if rec is None:
            return False
        task = asyncio.get_running_loop().create_task(self.complete(rec, kind, params))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    def dispatch_initial(self, item_id: str) -> None:
        """Analyses every new item gets right away."""
        self.dispatch(item_id, EnrichmentKind.STYLE)
        self.dispatch(item_id, EnrichmentKind.FACE_EMOTION)

    async def drain(self) -> None:
        """Wait for every background enrichment started so far."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
