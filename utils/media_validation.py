"""Validation and encoding helpers for uploaded images."""

import base64
import io
from typing import Optional

from PIL import Image, UnidentifiedImageError

MAX_FILE_SIZE_BYTES = 30 * 1024 * 1024
DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"


def exceeds_size_limit(size: Optional[int], limit: int = MAX_FILE_SIZE_BYTES) -> bool:
    """Return True when a known byte size is above the intake ceiling."""
    return size is not None and size > limit


def encode_base64(raw: bytes) -> str:
    """Return the base64 text of raw bytes (no data-URL prefix)."""
    return base64.b64encode(raw).decode("ascii")


def sniff_mime_type(raw: bytes) -> Optional[str]:
    """Identify the image MIME type from the file content itself.

    Returns None when Pillow cannot identify the bytes as an image.
    """
    try:
        with Image.open(io.BytesIO(raw)) as img:
            image_format = img.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError):
        return None
    if not image_format:
        return None
    return Image.MIME.get(image_format.upper())


def normalize_content_type(content_type: Optional[str]) -> Optional[str]:
    """Lower-case a declared content type and drop any parameters."""
    if not content_type:
        return None
    cleaned = content_type.lower().split(";", 1)[0].strip()
    return cleaned or None


def resolve_mime_type(raw: bytes, declared: Optional[str]) -> str:
    """Pick the MIME type: sniffed content, then declared type, then JPEG."""
    return sniff_mime_type(raw) or normalize_content_type(declared) or DEFAULT_IMAGE_MIME_TYPE
