"""
Purpose:
- The five Gemini call sites: caption, style, face/emotion, alt-text, translation.
- Each returns a plain result/error pair; none raise.

How it's used:
- services/enrichment.py awaits these and folds the result into the item store.
- Error wording is per call site (config error vs HTTP/transport error).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..gemini import prompts
from ..gemini.client import GeminiClient, Generation
from ..gemini.parsing import clean_style, clip_alt_text, split_hashtags
from ..media.images import EncodedImage

@dataclass(frozen=True)
class CaptionResult:
    caption: str = ""
    hashtags: str = ""
    error: Optional[str] = None

@dataclass(frozen=True)
class TextResult:
    text: str = ""
    error: Optional[str] = None

MISSING_KEY = {
    "caption": "API Key not set. Please set SNAPCAPTION_GEMINI_API_KEY in your environment or .env file.",
    "style": "API Key not set for style recognition.",
    "face_emotion": "API Key not set for face/emotion analysis.",
    "alt_text": "API Key not set for SEO alt-text generation.",
    "translation": "API Key not set for translation.",
}

# HTTP error answered by the server
FAILURE_PREFIX = {
    "style": "Style recognition failed",
    "face_emotion": "Face/Emotion analysis failed",
    "alt_text": "SEO alt-text generation failed",
    "translation": "Translation failed",
}

# request never got an answer (connect error, timeout, ...)
TRANSPORT_PREFIX = {
    "caption": "Failed to generate caption",
    "style": "Failed to recognize style",
    "face_emotion": "Failed to analyze face/emotion",
    "alt_text": "Failed to generate SEO alt-text",
    "translation": "Failed to translate",
}

def _error_for(site: str, gen: Generation) -> Optional[str]:
    if gen.config_error:
        return MISSING_KEY[site]
    if gen.error is None:
        return None
    if gen.status_code is None:
        return f"{TRANSPORT_PREFIX[site]}: {gen.error}"
    if site == "caption":
        return f"API request failed with status {gen.status_code}. Details: {gen.error}"
    return f"{FAILURE_PREFIX[site]}: {gen.error}"

async def generate_caption(client: GeminiClient, image: EncodedImage, style: str,
                           include_hashtags: bool) -> CaptionResult:
    gen = await client.generate(prompts.caption_prompt(style, include_hashtags), image)
    err = _error_for("caption", gen)
    if err:
        return CaptionResult(error=err)
    caption, hashtags = split_hashtags(gen.text, include_hashtags)
    return CaptionResult(caption=caption, hashtags=hashtags)

async def recognize_style(client: GeminiClient, image: EncodedImage) -> TextResult:
    gen = await client.generate(prompts.STYLE_PROMPT, image)
    err = _error_for("style", gen)
    return TextResult(error=err) if err else TextResult(text=clean_style(gen.text))

async def analyze_face_emotion(client: GeminiClient, image: EncodedImage) -> TextResult:
    gen = await client.generate(prompts.FACE_EMOTION_PROMPT, image)
    err = _error_for("face_emotion", gen)
    return TextResult(error=err) if err else TextResult(text=gen.text.strip())

async def generate_alt_text(client: GeminiClient, image: EncodedImage, limit: int = 125) -> TextResult:
    gen = await client.generate(prompts.alt_text_prompt(limit), image)
    err = _error_for("alt_text", gen)
    return TextResult(error=err) if err else TextResult(text=clip_alt_text(gen.text, limit))

async def translate_text(client: GeminiClient, text: str, language: str) -> TextResult:
    if not client.configured:
        return TextResult(error=MISSING_KEY["translation"])
    if not text:
        return TextResult(error="No text provided for translation.")
    gen = await client.generate(prompts.translation_prompt(text, language))
    err = _error_for("translation", gen)
    return TextResult(error=err) if err else TextResult(text=gen.text.strip())
