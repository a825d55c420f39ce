"""
Purpose:
- Pure, heuristic parsers for Gemini response text.
- None of these raise: unexpected shapes degrade to "" or to the whole (trimmed) string.

Notes:
- Transport and HTTP errors are handled in gemini/client.py, never here.
"""

from __future__ import annotations
import re
from typing import Any, Tuple

# A run of "#word" tokens closing a line; the first such run wins.
HASHTAG_RUN = re.compile(r"(#\w+\b(?:\s#\w+\b)*)$", flags=re.MULTILINE)

# Filler the model likes to wrap around a one-word style answer.
STYLE_FILLER = re.compile(r"style:|genre:|this image is a |this is a |\ban\s|image|\.")

EMOTION_LABELS = [
    ("happy", "Happy 😄"),
    ("sad", "Sad 😢"),
    ("angry", "Angry 😠"),
    ("neutral", "Neutral 😐"),
    ("surprised", "Surprised 😮"),
    ("disgusted", "Disgusted 🤢"),
    ("fearful", "Fearful 😨"),
    ("contempt", "Contempt 😒"),
    ("no faces detected", "No faces detected. 🚫"),
]

def extract_text(payload: Any) -> str:
    """Return candidates[0].content.parts[0].text, or "" when any step is missing."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return ""
    return text if isinstance(text, str) else ""

def split_hashtags(text: str, include_hashtags: bool) -> Tuple[str, str]:
    """
    Split a caption response into (caption, hashtags).
    - hashtags requested + trailing run found: run is removed from the caption
    - otherwise: whole trimmed text is the caption, hashtags ""
    """
    text = text or ""
    if not include_hashtags:
        return text.strip(), ""
    m = HASHTAG_RUN.search(text)
    if not m:
        return text.strip(), ""
    caption = (text[: m.start()] + text[m.end():]).strip()
    return caption, m.group(0).strip()

def clean_style(text: str) -> str:
    """'This is a landscape.' -> 'landscape'"""
    return STYLE_FILLER.sub("", (text or "").lower()).strip()

def clip_alt_text(text: str, limit: int = 125) -> str:
    return (text or "").strip()[:limit]

def label_emotion(text: str) -> str:
    """Map a face/emotion description to a short emoji label; unknown text passes through."""
    low = (text or "").lower()
    for keyword, label in EMOTION_LABELS:
        if keyword in low:
            return label
    return text
