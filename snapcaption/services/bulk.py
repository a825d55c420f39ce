"""
Purpose:
- "Generate all" and "translate all": apply the single-item enrichment to every eligible item.
- Best-effort concurrent dispatch: no ordering, no rollback; each item's outcome is reported on its own.
"""

from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from ..core.errors import BulkError, EmptyCollection
from ..store.models import EnrichmentKind, ItemRecord
from .enrichment import EnrichmentTracker

logger = logging.getLogger(__name__)

SKIPPED = "skipped"

@dataclass
class BulkReport:
    outcomes: Dict[str, str] = field(default_factory=dict)   # item_id -> done|busy|missing|skipped

    @property
    def dispatched(self) -> int:
        return sum(1 for o in self.outcomes.values() if o != SKIPPED)

    def as_dict(self) -> dict:
        return {"ok": True, "dispatched": self.dispatched, "outcomes": self.outcomes}

def needs_caption(rec: ItemRecord) -> bool:
    kind = EnrichmentKind.CAPTION
    return not rec.in_flight(kind) and not rec.caption and not rec.error_of(kind)

def needs_translation(rec: ItemRecord) -> bool:
    kind = EnrichmentKind.TRANSLATION
    return bool(rec.caption) and not rec.in_flight(kind) and not rec.error_of(kind)

async def _fan_out(tracker: EnrichmentTracker, items: List[ItemRecord], eligible, kind: EnrichmentKind,
                   **params) -> BulkReport:
    report = BulkReport()
    targets: List[str] = []
    for rec in items:
        if eligible(rec):
            targets.append(rec.item_id)
        else:
            report.outcomes[rec.item_id] = SKIPPED
    if not targets:
        logger.info("Bulk %s: nothing eligible", kind.value)
        return report

    logger.info("Bulk %s: dispatching %d item(s)", kind.value, len(targets))
    results = await asyncio.gather(
        *(tracker.run(item_id, kind, **params) for item_id in targets),
        return_exceptions=True,
    )
    for item_id, res in zip(targets, results):
        if isinstance(res, BaseException):
            logger.warning("Bulk %s failed for %s: %r", kind.value, item_id, res)
            res = "failed"
        report.outcomes[item_id] = res
    return report

async def generate_all(tracker: EnrichmentTracker, style: str, include_hashtags: bool) -> BulkReport:
    items = list(tracker.store.items)
    if not items:
        raise EmptyCollection("Please upload or capture images first!")
    return await _fan_out(tracker, items, needs_caption, EnrichmentKind.CAPTION,
                          style=style, include_hashtags=include_hashtags)

async def translate_all(tracker: EnrichmentTracker, language: str) -> BulkReport:
    if not language:
        raise BulkError("Please select a target language for translation.")
    items = list(tracker.store.items)
    return await _fan_out(tracker, items, needs_translation, EnrichmentKind.TRANSLATION,
                          language=language)
