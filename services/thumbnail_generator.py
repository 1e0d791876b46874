"""Thumbnail previews for uploaded source images.

Provides a small wrapper around Pillow that renders an `ImageRecord` as a
PNG preview fitting within 64x64 pixels, the size of one tile in the image
list.

Example:
    tg = ThumbnailGenerator()
    png_bytes = tg.create_thumbnail(record)
"""
from __future__ import annotations

import io
from typing import Tuple

from PIL import Image

from models.image_record import ImageRecord


class ThumbnailGenerator:
    """Generate PNG thumbnails from image records.

    Args:
        max_size: Maximum width and height for the thumbnail. Defaults to (64, 64).
        background: RGB color used to flatten transparent images. Defaults to white.
    """

    def __init__(self, max_size: Tuple[int, int] = (64, 64), background: Tuple[int, int, int] | None = None):
        self.max_size = max_size
        self.background = background or (255, 255, 255)

    def create_thumbnail(self, record: ImageRecord) -> bytes:
        """Return PNG bytes of a thumbnail for `record`.

        Raises:
            ValueError: If the record's payload is not a decodable image.
        """
        try:
            src = Image.open(io.BytesIO(record.decoded_bytes()))
            src.load()
        except Exception as exc:
            raise ValueError(f"Image {record.original_name} cannot be previewed") from exc

        src = src.convert("RGBA")
        src.thumbnail(self.max_size, Image.LANCZOS)

        flattened = Image.new("RGB", src.size, self.background)
        flattened.paste(src, mask=src.split()[3])

        out_io = io.BytesIO()
        flattened.save(out_io, format="PNG", optimize=True)
        return out_io.getvalue()
