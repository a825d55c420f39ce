from io import BytesIO

import pytest
from PIL import Image

from snapcaption.media.images import is_image_type, normalize_image

from conftest import make_image_bytes, oversized_png


def test_oversized_image_is_bounded():
    img = normalize_image(make_image_bytes((3000, 1500)), 1200, 1200, "WEBP", 80)
    assert (img.width, img.height) == (1200, 600)
    assert img.mime_type == "image/webp"
    with Image.open(BytesIO(img.data)) as out:
        assert out.format == "WEBP"
        assert out.size == (1200, 600)


def test_small_image_is_not_upscaled():
    img = normalize_image(make_image_bytes((300, 200)))
    assert (img.width, img.height) == (300, 200)


def test_transparent_png_is_encoded():
    buf = BytesIO()
    Image.new("RGBA", (40, 40), (0, 0, 0, 0)).save(buf, format="PNG")
    img = normalize_image(buf.getvalue())
    assert img.mime_type == "image/webp"


def test_undecodable_bytes():
    with pytest.raises(ValueError):
        normalize_image(b"definitely not an image")


@pytest.mark.parametrize("content_type, expected", [
    ("image/png", True),
    ("IMAGE/JPEG", True),
    ("text/plain", False),
    ("", False),
    (None, False),
])
def test_is_image_type(content_type, expected):
    assert is_image_type(content_type) is expected


def test_decompression_bomb_is_rejected_as_undecodable():
    with pytest.raises(ValueError, match="too large"):
        normalize_image(oversized_png())
