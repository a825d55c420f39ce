"""Tests for the Gemini transport wrapper."""

import base64
import json

import httpx
import pytest

from snapcaption.gemini.client import GeminiClient, build_request_body

from conftest import RecordingTransport, tiny_image


def _client(cfg, handler):
    return GeminiClient(cfg, http=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestRequestShape:
    def test_text_only_body(self):
        assert build_request_body("hi") == {"contents": [{"parts": [{"text": "hi"}]}]}

    def test_image_part_is_inlined(self):
        img = tiny_image()
        body = build_request_body("describe", img)
        parts = body["contents"][0]["parts"]
        assert parts[0] == {"text": "describe"}
        assert parts[1]["inlineData"]["mimeType"] == "image/webp"
        assert base64.b64decode(parts[1]["inlineData"]["data"]) == img.data

    @pytest.mark.asyncio
    async def test_posts_to_generate_content(self, gemini, transport):
        gen = await gemini.generate("Translate the following text into French.")
        assert gen.ok
        req = transport.requests[0]
        assert req.method == "POST"
        assert req.url.path == "/v1beta/models/gemini-2.0-flash:generateContent"
        assert req.url.params["key"] == "test-key"
        assert json.loads(req.content)["contents"][0]["parts"][0]["text"].startswith("Translate")


class TestFailures:
    @pytest.mark.asyncio
    async def test_missing_key_sends_nothing(self, cfg):
        cfg = cfg.model_copy(update={"gemini_api_key": None})
        transport = RecordingTransport()
        client = GeminiClient(cfg, http=httpx.AsyncClient(transport=transport.transport))
        gen = await client.generate("anything")
        assert gen.config_error
        assert not gen.ok
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_http_error_carries_server_detail(self, cfg):
        transport = RecordingTransport(status_code=400, error_body={"error": {"message": "API key not valid."}})
        client = GeminiClient(cfg, http=httpx.AsyncClient(transport=transport.transport))
        gen = await client.generate("x")
        assert gen.error == "API key not valid."
        assert gen.status_code == 400

    @pytest.mark.asyncio
    async def test_http_error_without_json_uses_reason(self, cfg):
        transport = RecordingTransport(status_code=500)
        client = GeminiClient(cfg, http=httpx.AsyncClient(transport=transport.transport))
        gen = await client.generate("x")
        assert gen.error == "Internal Server Error"
        assert gen.status_code == 500

    @pytest.mark.asyncio
    async def test_transport_error_does_not_raise(self, cfg):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        gen = await _client(cfg, handler).generate("x")
        assert gen.error == "connection refused"
        assert gen.status_code is None

    @pytest.mark.asyncio
    async def test_unexpected_shape_is_empty_text(self, cfg):
        gen = await _client(cfg, lambda r: httpx.Response(200, json={"promptFeedback": {}})).generate("x")
        assert gen.ok
        assert gen.text == ""

    @pytest.mark.asyncio
    async def test_non_json_success_is_empty_text(self, cfg):
        gen = await _client(cfg, lambda r: httpx.Response(200, text="<html>")).generate("x")
        assert gen.ok
        assert gen.text == ""
