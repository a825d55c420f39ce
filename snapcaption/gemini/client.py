"""
Purpose:
- Stateless request/response wrapper around Gemini `generateContent`.
- One operation: generate(prompt, image=None) -> Generation(text, error).
- Never raises past its own boundary; the caller decides how to word errors.

Notes:
- Requires settings.gemini_api_key (SNAPCAPTION_GEMINI_API_KEY in env or .env).
- A single httpx.AsyncClient is shared; its timeout is the only one enforced.
"""

from __future__ import annotations
import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ..core.settings import Settings
from ..media.images import EncodedImage
from .parsing import extract_text

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Generation:
    text: str = ""
    error: Optional[str] = None
    config_error: bool = False      # no API key; nothing was sent
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.config_error

def build_request_body(prompt: str, image: Optional[EncodedImage] = None) -> Dict[str, Any]:
    parts: list[dict] = [{"text": prompt}]
    if image is not None:
        parts.append({
            "inlineData": {
                "mimeType": image.mime_type,
                "data": base64.b64encode(image.data).decode("ascii"),
            }
        })
    return {"contents": [{"parts": parts}]}

def _error_detail(resp: httpx.Response) -> Optional[str]:
    try:
        data = resp.json()
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        return data["error"].get("message")
    return None

class GeminiClient:
    def __init__(self, cfg: Settings, http: Optional[httpx.AsyncClient] = None):
        self.cfg = cfg
        self._http = http or httpx.AsyncClient(timeout=cfg.request_timeout)

    @property
    def configured(self) -> bool:
        return bool(self.cfg.gemini_api_key)

    @property
    def endpoint(self) -> str:
        base = self.cfg.gemini_base_url.rstrip("/")
        return f"{base}/models/{self.cfg.gemini_model}:generateContent"

    async def generate(self, prompt: str, image: Optional[EncodedImage] = None) -> Generation:
        if not self.configured:
            return Generation(config_error=True)

        body = build_request_body(prompt, image)
        try:
            resp = await self._http.post(
                self.endpoint,
                params={"key": self.cfg.gemini_api_key},
                json=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.warning("Gemini request failed: %r", e)
            return Generation(error=str(e) or e.__class__.__name__)

        if not resp.is_success:
            detail = _error_detail(resp)
            logger.warning("Gemini returned %s: %s", resp.status_code, detail or resp.reason_phrase)
            return Generation(error=detail or resp.reason_phrase, status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError:
            # unexpected shape degrades to empty text, not an error
            payload = None
        return Generation(text=extract_text(payload), status_code=resp.status_code)

    async def aclose(self) -> None:
        await self._http.aclose()
