"""
Purpose:
- Normalize every incoming image (upload or camera still) once, before it is stored or sent.
- Bounded dimensions (default 1200x1200, aspect kept, never upscaled), EXIF-corrected, WEBP q80.
"""

from __future__ import annotations
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

_MIME_BY_FORMAT = {
    "WEBP": "image/webp",
    "JPEG": "image/jpeg",
    "PNG": "image/png",
}

@dataclass(frozen=True)
class EncodedImage:
    data: bytes
    mime_type: str
    width: int
    height: int

def is_image_type(content_type: Optional[str]) -> bool:
    return bool(content_type) and content_type.lower().startswith("image/")

def encode_image(img: Image.Image, fmt: str = "WEBP", quality: int = 80) -> EncodedImage:
    fmt = fmt.upper()
    if fmt == "JPEG" and img.mode not in ("RGB", "L"):
        img = img.convert("RGB")
    elif img.mode not in ("RGB", "RGBA", "L"):
        img = img.convert("RGBA" if "A" in img.getbands() else "RGB")
    buf = BytesIO()
    img.save(buf, format=fmt, quality=quality)
    return EncodedImage(
        data=buf.getvalue(),
        mime_type=_MIME_BY_FORMAT.get(fmt, f"image/{fmt.lower()}"),
        width=img.width,
        height=img.height,
    )

def bound_image(img: Image.Image, max_width: int, max_height: int) -> Image.Image:
    img = ImageOps.exif_transpose(img)
    if img.width > max_width or img.height > max_height:
        img = img.copy()
        img.thumbnail((max_width, max_height), Image.Resampling.LANCZOS)
    return img

def normalize_image(raw: bytes, max_width: int = 1200, max_height: int = 1200,
                    fmt: str = "WEBP", quality: int = 80) -> EncodedImage:
    """
    Decode, bound and re-encode raw image bytes.
    Raises ValueError if Pillow cannot decode them or refuses them as a decompression bomb.
    """
    try:
        img = Image.open(BytesIO(raw))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"not a decodable image: {e}") from e
    except Image.DecompressionBombError as e:
        raise ValueError(f"image too large: {e}") from e
    return encode_image(bound_image(img, max_width, max_height), fmt=fmt, quality=quality)
