"""
Purpose:
- Camera capture surface as an explicit state machine:
    INACTIVE --start--> STREAMING --capture--> FROZEN --confirm--> INACTIVE (emits the still)
                                              FROZEN --retake--> STREAMING
  stop() returns to INACTIVE from anywhere; switch_facing() re-acquires while streaming.
- Device failures are classified into a few user-facing messages and end that attempt.

Notes:
- OpenCVCamera is the production device; tests pass a fake CameraDevice.
- Calls are serialized with a lock (routes run them in the threadpool).
"""

from __future__ import annotations
import errno
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from typing import Callable, Optional, Protocol

import numpy as np
from PIL import Image

from ..core.errors import CameraError, InvalidTransition
from .images import encode_image

logger = logging.getLogger(__name__)

class CaptureState(str, Enum):
    INACTIVE = "inactive"
    STREAMING = "streaming"
    FROZEN = "frozen"

FACING_MODES = ("user", "environment")

# --- Device errors -----------------------------------------------------------

class CameraNotFound(LookupError):
    pass

class CameraBusy(OSError):
    pass

_PREFIX = "Could not access camera. "

def classify_camera_error(exc: BaseException) -> CameraError:
    """Turn a device exception into a CameraError with a user-facing message."""
    if isinstance(exc, PermissionError):
        return CameraError(_PREFIX + "Permission denied. Please allow camera access in your system settings.",
                           category="permission_denied")
    if isinstance(exc, (CameraNotFound, FileNotFoundError)):
        return CameraError(_PREFIX + "No camera found on this device.", category="not_found")
    if isinstance(exc, CameraBusy) or (isinstance(exc, OSError) and exc.errno == errno.EBUSY):
        return CameraError(_PREFIX + "Camera is already in use by another application.", category="busy")
    return CameraError(_PREFIX + f"Details: {exc}", category="other")

# --- Devices -----------------------------------------------------------------

class CameraDevice(Protocol):
    def open(self, index: int, width: int, height: int) -> None: ...
    def read(self) -> Optional[np.ndarray]: ...      # RGB frame, None when nothing is available
    def release(self) -> None: ...

class OpenCVCamera:
    """cv2.VideoCapture-backed device."""

    def __init__(self) -> None:
        self._cap = None

    def open(self, index: int, width: int, height: int) -> None:
        import cv2

        cap = cv2.VideoCapture(index)
        if not cap.isOpened():
            cap.release()
            raise CameraNotFound(f"no camera at index {index}")
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        ok, _ = cap.read()
        if not ok:
            # opened but yields nothing: another process holds it
            cap.release()
            raise CameraBusy(errno.EBUSY, f"camera {index} returned no frames")
        self._cap = cap

    def read(self) -> Optional[np.ndarray]:
        import cv2

        if self._cap is None:
            return None
        ok, frame = self._cap.read()
        if not ok or frame is None:
            return None
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None

# --- Session -----------------------------------------------------------------

@dataclass(frozen=True)
class CapturedImage:
    filename: str
    data: bytes
    mime_type: str

class CaptureSession:
    def __init__(self, device_factory: Callable[[], CameraDevice], *, user_index: int = 0,
                 environment_index: int = 1, width: int = 1280, height: int = 720, quality: int = 90):
        self._factory = device_factory
        self._indices = dict(zip(FACING_MODES, (user_index, environment_index)))
        self._size = (width, height)
        self._quality = quality
        self._lock = threading.Lock()
        self._device: Optional[CameraDevice] = None
        self._still: Optional[bytes] = None
        self.state = CaptureState.INACTIVE
        self.facing = FACING_MODES[0]
        self.error: Optional[str] = None

    def snapshot(self) -> dict:
        return {"state": self.state.value, "facing": self.facing, "error": self.error,
                "has_still": self._still is not None}

    def _require(self, *states: CaptureState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise InvalidTransition(f"camera is {self.state.value}; expected {allowed}")

    def _acquire(self) -> None:
        device = self._factory()
        try:
            device.open(self._indices[self.facing], *self._size)
        except Exception as e:
            err = classify_camera_error(e)
            logger.info("Camera acquisition failed (%s): %r", err.category, e)
            self._release()
            self.state = CaptureState.INACTIVE
            self.error = str(err)
            raise err from e
        self._device = device
        self.state = CaptureState.STREAMING

    def _release(self) -> None:
        if self._device is not None:
            self._device.release()
            self._device = None

    def start(self) -> dict:
        with self._lock:
            self._require(CaptureState.INACTIVE)
            self.error = None
            self._still = None
            self._acquire()
            return self.snapshot()

    def capture(self) -> dict:
        with self._lock:
            self._require(CaptureState.STREAMING)
            frame = self._device.read() if self._device is not None else None
            if frame is None:
                self.error = "Camera not ready for capture."
                raise CameraError(self.error, category="not_ready")
            # live stream stops once a frame is frozen
            self._release()
            self._still = encode_image(Image.fromarray(frame), fmt="WEBP", quality=self._quality).data
            self.state = CaptureState.FROZEN
            return self.snapshot()

    def confirm(self) -> CapturedImage:
        with self._lock:
            self._require(CaptureState.FROZEN)
            still, self._still = self._still, None
            self.state = CaptureState.INACTIVE
            self.error = None
            return CapturedImage(
                filename=f"snapshot_{int(time.time() * 1000)}.webp",
                data=still,
                mime_type="image/webp",
            )

    def retake(self) -> dict:
        with self._lock:
            self._require(CaptureState.FROZEN)
            self._still = None
            self.error = None
            self._acquire()
            return self.snapshot()

    def stop(self) -> dict:
        with self._lock:
            self._release()
            self._still = None
            self.error = None
            self.state = CaptureState.INACTIVE
            return self.snapshot()

    def switch_facing(self) -> dict:
        with self._lock:
            self.facing = FACING_MODES[1 - FACING_MODES.index(self.facing)]
            if self.state is CaptureState.STREAMING:
                self._release()
                self._acquire()
            return self.snapshot()

    def preview(self) -> Optional[bytes]:
        """Current frame (streaming) or the frozen still, as JPEG."""
        with self._lock:
            if self.state is CaptureState.FROZEN and self._still is not None:
                with Image.open(BytesIO(self._still)) as img:
                    return encode_image(img.convert("RGB"), fmt="JPEG", quality=85).data
            if self.state is CaptureState.STREAMING and self._device is not None:
                frame = self._device.read()
                if frame is not None:
                    return encode_image(Image.fromarray(frame), fmt="JPEG", quality=85).data
            return None

    def close(self) -> None:
        self.stop()
