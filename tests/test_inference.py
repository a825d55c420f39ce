"""Tests for the five call sites: prompts, parsing and per-site error wording."""

import httpx
import pytest

from snapcaption.gemini.client import GeminiClient
from snapcaption.services import inference

from conftest import RecordingTransport, tiny_image


def _client(cfg, transport):
    return GeminiClient(cfg, http=httpx.AsyncClient(transport=transport.transport))


@pytest.mark.asyncio
async def test_caption_with_hashtags(gemini, transport):
    r = await inference.generate_caption(gemini, tiny_image(), "funny", True)
    assert r.caption == "A sunny day at the beach."
    assert r.hashtags == "#beach #sun #summer"
    assert r.error is None
    prompt = transport.prompts()[0]
    assert "funny caption" in prompt
    assert "hashtags" in prompt


@pytest.mark.asyncio
async def test_caption_without_hashtags_keeps_full_text(gemini, transport):
    r = await inference.generate_caption(gemini, tiny_image(), "poetic", False)
    assert r.caption == "A sunny day at the beach.\n#beach #sun #summer"
    assert r.hashtags == ""
    assert "hashtags" not in transport.prompts()[0]


@pytest.mark.asyncio
async def test_style_is_cleaned(gemini):
    r = await inference.recognize_style(gemini, tiny_image())
    assert r.text == "landscape"


@pytest.mark.asyncio
async def test_alt_text_is_clipped(gemini):
    r = await inference.generate_alt_text(gemini, tiny_image())
    assert r.text == "A" * 125


@pytest.mark.asyncio
async def test_face_emotion_trimmed(cfg):
    client = _client(cfg, RecordingTransport(reply=lambda p: "  No faces detected.  "))
    r = await inference.analyze_face_emotion(client, tiny_image())
    assert r.text == "No faces detected."


@pytest.mark.asyncio
async def test_translate_text_only(gemini, transport):
    r = await inference.translate_text(gemini, "A sunny day", "Spanish")
    assert r.text == "Un día soleado en la playa."
    body_parts = transport.requests[0].content
    assert b"inlineData" not in body_parts


@pytest.mark.asyncio
async def test_translate_empty_text_makes_no_call(gemini, transport):
    r = await inference.translate_text(gemini, "", "Spanish")
    assert r.error == "No text provided for translation."
    assert transport.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize("call, message", [
    (lambda c: inference.generate_caption(c, tiny_image(), "funny", False), inference.MISSING_KEY["caption"]),
    (lambda c: inference.recognize_style(c, tiny_image()), "API Key not set for style recognition."),
    (lambda c: inference.analyze_face_emotion(c, tiny_image()), "API Key not set for face/emotion analysis."),
    (lambda c: inference.generate_alt_text(c, tiny_image()), "API Key not set for SEO alt-text generation."),
    (lambda c: inference.translate_text(c, "hello", "French"), "API Key not set for translation."),
])
async def test_missing_key_messages(cfg, call, message):
    client = GeminiClient(cfg.model_copy(update={"gemini_api_key": None}))
    r = await call(client)
    assert r.error == message


@pytest.mark.asyncio
async def test_caption_http_error_wording(cfg):
    transport = RecordingTransport(status_code=429, error_body={"error": {"message": "Resource exhausted"}})
    r = await inference.generate_caption(_client(cfg, transport), tiny_image(), "funny", False)
    assert r.error == "API request failed with status 429. Details: Resource exhausted"
    assert r.caption == ""


@pytest.mark.asyncio
async def test_style_http_error_wording(cfg):
    transport = RecordingTransport(status_code=403, error_body={"error": {"message": "Forbidden key"}})
    r = await inference.recognize_style(_client(cfg, transport), tiny_image())
    assert r.error == "Style recognition failed: Forbidden key"


@pytest.mark.asyncio
@pytest.mark.parametrize("call, message", [
    (lambda c: inference.generate_caption(c, tiny_image(), "funny", False), "Failed to generate caption: refused"),
    (lambda c: inference.recognize_style(c, tiny_image()), "Failed to recognize style: refused"),
    (lambda c: inference.analyze_face_emotion(c, tiny_image()), "Failed to analyze face/emotion: refused"),
    (lambda c: inference.generate_alt_text(c, tiny_image()), "Failed to generate SEO alt-text: refused"),
    (lambda c: inference.translate_text(c, "hello", "French"), "Failed to translate: refused"),
])
async def test_transport_error_wording(cfg, call, message):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = GeminiClient(cfg, http=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    r = await call(client)
    assert r.error == message
