"""
Purpose:
- Pick the text a user copies or shares for an item.
- A selected language wins only when a translation of the *current* caption exists.
"""

from __future__ import annotations
from typing import Dict, Optional
from urllib.parse import quote

from ..store.models import ItemRecord

def display_caption(rec: ItemRecord, language: str = "") -> str:
    return rec.translation_for(language) or rec.caption

def copy_text(rec: ItemRecord, language: str = "", specific: Optional[str] = None) -> str:
    """
    Text for the clipboard:
    - specific text (e.g. alt-text) when given
    - else the translated caption when one matches the selected language
    - else caption + hashtags on the next line
    Empty string means there is nothing to copy.
    """
    if specific is not None:
        return specific
    translated = rec.translation_for(language)
    if translated:
        return translated
    if not rec.caption:
        return ""
    return rec.caption + (f"\n{rec.hashtags}" if rec.hashtags else "")

def share_links(rec: ItemRecord, language: str = "") -> Dict[str, str]:
    caption = display_caption(rec, language)
    tweet = f"{caption} {rec.hashtags or ''}"
    return {
        "whatsapp": f"https://wa.me/?text={quote(caption, safe='')}",
        "twitter": f"https://twitter.com/intent/tweet?text={quote(tweet, safe='')}",
    }
