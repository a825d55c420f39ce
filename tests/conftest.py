"""Shared fixtures: settings in a temp dir, fake Gemini backends, fake camera, sample images."""

import asyncio
import functools
import json
from io import BytesIO
from typing import Callable, List, Optional

import httpx
import numpy as np
import pytest
from PIL import Image

from snapcaption.core.settings import Settings
from snapcaption.gemini.client import GeminiClient, Generation
from snapcaption.media.images import EncodedImage
from snapcaption.media.previews import PreviewRegistry
from snapcaption.store.items import ItemStore


def make_image_bytes(size=(64, 48), color=(200, 120, 40), fmt="PNG") -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


def tiny_image() -> EncodedImage:
    return EncodedImage(data=b"RIFF....WEBP", mime_type="image/webp", width=4, height=3)


@functools.lru_cache(maxsize=None)
def oversized_png() -> bytes:
    """Tiny on disk, but past Pillow's decompression-bomb pixel limit (200M pixels)."""
    buf = BytesIO()
    Image.new("1", (20000, 10000)).save(buf, format="PNG")
    return buf.getvalue()


def canned_reply(prompt: str) -> str:
    """What the fake model says, keyed on which call site built the prompt."""
    if "primary style" in prompt:
        return "This is a landscape."
    if "human faces" in prompt:
        return "One person, looks happy."
    if "alt-text" in prompt:
        return "A" * 200
    if prompt.startswith("Translate"):
        return "Un día soleado en la playa."
    return "A sunny day at the beach.\n#beach #sun #summer"


def gemini_payload(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class RecordingTransport:
    """httpx.MockTransport wrapper that answers like generateContent and records requests."""

    def __init__(self, reply: Callable[[str], str] = canned_reply, status_code: int = 200,
                 error_body: Optional[dict] = None):
        self.reply = reply
        self.status_code = status_code
        self.error_body = error_body
        self.requests: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json=self.error_body) if self.error_body is not None \
                else httpx.Response(self.status_code, text="oops")
        body = json.loads(request.content)
        prompt = body["contents"][0]["parts"][0]["text"]
        return httpx.Response(200, json=gemini_payload(self.reply(prompt)))

    def prompts(self) -> List[str]:
        return [json.loads(r.content)["contents"][0]["parts"][0]["text"] for r in self.requests]


class FakeGemini:
    """Stands in for GeminiClient inside the tracker; replies per prompt, optionally held on a gate."""

    def __init__(self, reply: Callable[[str], Generation] = None, configured: bool = True):
        self.reply = reply or (lambda prompt: Generation(text=canned_reply(prompt)))
        self.configured = configured
        self.calls = []
        self.gate: Optional[asyncio.Event] = None
        self.raises: Optional[BaseException] = None

    async def generate(self, prompt, image=None):
        self.calls.append((prompt, image))
        if self.gate is not None:
            await self.gate.wait()
        if self.raises is not None:
            raise self.raises
        return self.reply(prompt)

    async def aclose(self):
        pass


class FakeCamera:
    """CameraDevice double. Frames are solid RGB arrays."""

    instances: List["FakeCamera"] = []

    def __init__(self, open_error: Optional[BaseException] = None, frames: bool = True):
        self.open_error = open_error
        self.frames = frames
        self.opened_with = None
        self.released = 0
        FakeCamera.instances.append(self)

    def open(self, index, width, height):
        if self.open_error is not None:
            raise self.open_error
        self.opened_with = (index, width, height)

    def read(self):
        if not self.frames or self.opened_with is None:
            return None
        return np.full((72, 128, 3), 90, dtype=np.uint8)

    def release(self):
        self.released += 1
        self.opened_with = None


@pytest.fixture
def cfg(tmp_path):
    return Settings(
        _env_file=None,
        gemini_api_key="test-key",
        preferences_file=tmp_path / "preferences.json",
        log_level="WARNING",
    )


@pytest.fixture
def store():
    return ItemStore(PreviewRegistry())


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def gemini(cfg, transport):
    return GeminiClient(cfg, http=httpx.AsyncClient(transport=transport.transport))


@pytest.fixture(autouse=True)
def _reset_fake_cameras():
    FakeCamera.instances.clear()
    yield
    FakeCamera.instances.clear()
