"""
Purpose:
- Hand out opaque preview handles for stored image bytes (served at /api/v1/previews/{handle}).
- Release is idempotent: a handle is freed at most once, later calls are no-ops.
"""

from __future__ import annotations
import logging
import secrets
import threading
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)

class PreviewRegistry:
    def __init__(self) -> None:
        self._blobs: Dict[str, Tuple[bytes, str]] = {}
        self._lock = threading.Lock()
        self.released = 0

    def create(self, data: bytes, mime_type: str) -> str:
        handle = secrets.token_urlsafe(12)
        with self._lock:
            self._blobs[handle] = (data, mime_type)
        return handle

    def get(self, handle: str) -> Optional[Tuple[bytes, str]]:
        with self._lock:
            return self._blobs.get(handle)

    def release(self, handle: str) -> bool:
        with self._lock:
            if self._blobs.pop(handle, None) is None:
                return False
            self.released += 1
        logger.debug("Released preview %s", handle)
        return True

    def __contains__(self, handle: str) -> bool:
        with self._lock:
            return handle in self._blobs

    def __len__(self) -> int:
        with self._lock:
            return len(self._blobs)
