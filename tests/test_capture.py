"""Camera state machine with a fake device."""

import errno

import pytest
from PIL import Image
from io import BytesIO

from snapcaption.core.errors import CameraError, InvalidTransition
from snapcaption.media.capture import (
    CameraBusy, CameraNotFound, CaptureSession, CaptureState, classify_camera_error,
)

from conftest import FakeCamera


def _session(factory=FakeCamera):
    return CaptureSession(factory, user_index=0, environment_index=1, width=640, height=480)


class TestTransitions:
    def test_full_cycle(self):
        cam = _session()
        assert cam.state is CaptureState.INACTIVE
        assert cam.start()["state"] == "streaming"
        device = FakeCamera.instances[-1]
        assert device.opened_with == (0, 640, 480)

        snap = cam.capture()
        assert snap["state"] == "frozen"
        assert snap["has_still"] is True
        assert device.released == 1

        still = cam.confirm()
        assert cam.state is CaptureState.INACTIVE
        assert still.filename.startswith("snapshot_") and still.filename.endswith(".webp")
        assert still.mime_type == "image/webp"
        with Image.open(BytesIO(still.data)) as img:
            assert img.format == "WEBP"
            assert img.size == (128, 72)

    def test_retake_reacquires(self):
        cam = _session()
        cam.start()
        cam.capture()
        assert cam.retake()["state"] == "streaming"
        assert len(FakeCamera.instances) == 2
        assert cam.snapshot()["has_still"] is False

    def test_stop_releases_device(self):
        cam = _session()
        cam.start()
        device = FakeCamera.instances[-1]
        assert cam.stop()["state"] == "inactive"
        assert device.released == 1

    def test_switch_facing_while_streaming(self):
        cam = _session()
        cam.start()
        snap = cam.switch_facing()
        assert snap["facing"] == "environment"
        assert snap["state"] == "streaming"
        assert FakeCamera.instances[0].released == 1
        assert FakeCamera.instances[-1].opened_with == (1, 640, 480)

    def test_switch_facing_while_inactive_only_flips(self):
        cam = _session()
        assert cam.switch_facing()["facing"] == "environment"
        assert FakeCamera.instances == []
        cam.start()
        assert FakeCamera.instances[-1].opened_with[0] == 1

    @pytest.mark.parametrize("step", ["capture", "confirm", "retake"])
    def test_invalid_from_inactive(self, step):
        cam = _session()
        with pytest.raises(InvalidTransition):
            getattr(cam, step)()

    def test_cannot_start_twice(self):
        cam = _session()
        cam.start()
        with pytest.raises(InvalidTransition):
            cam.start()

    def test_capture_without_frame(self):
        cam = _session(lambda: FakeCamera(frames=False))
        cam.start()
        with pytest.raises(CameraError) as exc:
            cam.capture()
        assert exc.value.category == "not_ready"
        assert cam.state is CaptureState.STREAMING

    def test_preview_formats(self):
        cam = _session()
        assert cam.preview() is None
        cam.start()
        assert cam.preview()[:2] == b"\xff\xd8"
        cam.capture()
        assert cam.preview()[:2] == b"\xff\xd8"


class TestAcquireFailures:
    def test_failed_open_returns_to_inactive(self):
        cam = _session(lambda: FakeCamera(open_error=PermissionError("denied")))
        with pytest.raises(CameraError) as exc:
            cam.start()
        assert exc.value.category == "permission_denied"
        assert cam.state is CaptureState.INACTIVE
        assert cam.snapshot()["error"].startswith("Could not access camera. Permission denied")

    def test_error_cleared_on_next_start(self):
        errors = [CameraNotFound("none"), None]
        cam = _session(lambda: FakeCamera(open_error=errors.pop(0)))
        with pytest.raises(CameraError):
            cam.start()
        cam.start()
        assert cam.snapshot()["error"] is None


@pytest.mark.parametrize("exc, category", [
    (PermissionError("x"), "permission_denied"),
    (CameraNotFound("x"), "not_found"),
    (FileNotFoundError("x"), "not_found"),
    (CameraBusy(errno.EBUSY, "x"), "busy"),
    (OSError(errno.EBUSY, "Device or resource busy"), "busy"),
    (RuntimeError("weird"), "other"),
])
def test_classify_camera_error(exc, category):
    err = classify_camera_error(exc)
    assert err.category == category
    assert str(err).startswith("Could not access camera. ")


def test_other_error_carries_details():
    assert str(classify_camera_error(RuntimeError("weird"))) == "Could not access camera. Details: weird"
