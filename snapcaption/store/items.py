"""
Purpose:
- Ordered in-memory collection of ItemRecords.
- All mutation goes through reduce_items(), a pure reducer keyed by item identity + kind.

Design:
- Copy-on-write: every applied action swaps in a new tuple (O(n) per mutation).
- Actions naming an identity that is no longer present are dropped, so a late
  resolve for a removed item can never bring it back.
- Removing an item releases its preview handle exactly once.
"""

from __future__ import annotations
import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from ..core.errors import ItemNotFound
from ..media.images import EncodedImage
from ..media.previews import PreviewRegistry
from .models import (
    Action, Add, Begin, EnrichmentKind, EnrichmentStatus, ItemRecord, KIND_FIELDS, Remove, Resolve,
)

logger = logging.getLogger(__name__)

Items = Tuple[ItemRecord, ...]

# What Begin clears: the kind's own value. Earlier translations survive a new translation request.
_BEGIN_CLEARS: Dict[EnrichmentKind, Dict[str, object]] = {
    EnrichmentKind.CAPTION: {"caption": "", "hashtags": ""},
    EnrichmentKind.STYLE: {"style": ""},
    EnrichmentKind.FACE_EMOTION: {"face_emotion": ""},
    EnrichmentKind.ALT_TEXT: {"alt_text": ""},
    EnrichmentKind.TRANSLATION: {},
}

def _with_status(rec: ItemRecord, kind: EnrichmentKind, st: EnrichmentStatus) -> Dict[EnrichmentKind, EnrichmentStatus]:
    status = dict(rec.status)
    status[kind] = st
    return status

def _begin(rec: ItemRecord, action: Begin) -> ItemRecord:
    return replace(
        rec,
        status=_with_status(rec, action.kind, EnrichmentStatus(in_flight=True, error=None)),
        **_BEGIN_CLEARS[action.kind],
    )

def _resolve(rec: ItemRecord, action: Resolve) -> ItemRecord:
    owned = KIND_FIELDS[action.kind]
    updates: Dict[str, object] = {}
    for name, value in action.fields.items():
        if name not in owned:
            raise ValueError(f"{action.kind.value} may not write field {name!r}")
        if name == "translations":
            merged = dict(rec.translations)
            merged.update(value)
            value = merged
        updates[name] = value
    return replace(
        rec,
        status=_with_status(rec, action.kind, EnrichmentStatus(in_flight=False, error=action.error)),
        **updates,
    )

def reduce_items(items: Items, action: Action) -> Items:
    """
    Apply one action and return the new collection.
    Returns `items` itself (same object) when the action does not apply.
    """
    if isinstance(action, Add):
        return items + tuple(action.records) if action.records else items

    if isinstance(action, Remove):
        kept = tuple(r for r in items if r.item_id != action.item_id)
        return items if len(kept) == len(items) else kept

    if isinstance(action, (Begin, Resolve)):
        step = _begin if isinstance(action, Begin) else _resolve
        out: List[ItemRecord] = []
        hit = False
        for rec in items:
            if rec.item_id == action.item_id:
                out.append(step(rec, action))
                hit = True
            else:
                out.append(rec)
        return tuple(out) if hit else items

    raise TypeError(f"unknown action: {action!r}")

class ItemStore:
    def __init__(self, previews: PreviewRegistry):
        self.previews = previews
        self._items: Items = ()

    @property
    def items(self) -> Items:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: str) -> Optional[ItemRecord]:
        for rec in self._items:
            if rec.item_id == item_id:
                return rec
        return None

    def require(self, item_id: str) -> ItemRecord:
        rec = self.get(item_id)
        if rec is None:
            raise ItemNotFound(item_id)
        return rec

    def dispatch(self, action: Action) -> bool:
        """Apply action; False if it named an identity that is gone."""
        new = reduce_items(self._items, action)
        if new is self._items:
            if isinstance(action, (Begin, Resolve)):
                logger.info("Dropped %s for missing item %s", type(action).__name__, action.item_id)
            return False
        self._items = new
        return True

    def add(self, filename: str, image: EncodedImage) -> ItemRecord:
        return self.add_many([(filename, image)])[0]

    def add_many(self, entries: Iterable[Tuple[str, EncodedImage]]) -> List[ItemRecord]:
        records = [
            ItemRecord.new(filename, image, self.previews.create(image.data, image.mime_type))
            for filename, image in entries
        ]
        self.dispatch(Add(tuple(records)))
        return records

    def remove(self, item_id: str) -> ItemRecord:
        rec = self.require(item_id)
        self.dispatch(Remove(item_id))
        self.previews.release(rec.preview)
        return rec

    def clear(self) -> int:
        """Drop every item and release its preview (app teardown)."""
        items, self._items = self._items, ()
        for rec in items:
            self.previews.release(rec.preview)
        return len(items)
