"""Image helpers shared by the generators."""

import base64
import io
import re

from PIL import Image, UnidentifiedImageError

_DATA_URL_RE = re.compile(r"^data:([^;,]*)(;base64)?,(.*)$", re.DOTALL)


def encode_data_url(data: bytes, mime_type: str = "image/png") -> str:
    """Encode raw bytes as a base64 data URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_url(url: str) -> tuple[bytes, str]:
    """Decode a data URL into (bytes, mime_type).

    The MIME type defaults to ``image/png`` when the header omits it.

    Raises:
        ValueError: If ``url`` is not a data URL
    """
    match = _DATA_URL_RE.match(url.strip())
    if not match:
        raise ValueError("Not a data URL")

    mime_type = match.group(1) or "image/png"
    payload = match.group(3)
    if match.group(2):
        data = base64.b64decode(payload)
    else:
        data = payload.encode("utf-8")
    return data, mime_type


def image_size(data: bytes) -> tuple[int, int]:
    """Return (width, height) of an encoded image."""
    with Image.open(io.BytesIO(data)) as img:
        return img.size


def detect_aspect_ratio(data: bytes) -> str:
    """Pick the closest video aspect ratio for an image.

    Video models accept 16:9 and 9:16 only: landscape images map to 16:9,
    square and portrait images to 9:16. Undecodable data falls back to 16:9.
    """
    try:
        width, height = image_size(data)
    except (UnidentifiedImageError, OSError, ValueError):
        return "16:9"

    if height and width / height > 1:
        return "16:9"
    return "9:16"
