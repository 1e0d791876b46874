"""Concurrent intake of uploaded source images.

Each file in a batch is read, size-checked and base64-encoded in its own
coroutine. Files complete in arbitrary order; every successful decode is
appended through a functional update of the collection as it stands at that
moment, so no completion can overwrite another.

Per-file failures (too large, unreadable) become warnings and never abort the
rest of the batch.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Callable, Iterable, List, Optional, Tuple

from models.file_input import FileInput
from models.image_record import ImageRecord
from models.session_models import IntakeReport, IntakeWarning
from utils.errors import FileTooLarge, FileUnreadable, GenerationError
from utils.media_validation import (
    MAX_FILE_SIZE_BYTES,
    encode_base64,
    exceeds_size_limit,
    resolve_mime_type,
)

LOGGER = logging.getLogger(__name__)

ImageCollection = Tuple[ImageRecord, ...]


def _encode(raw: bytes, declared_type: Optional[str]) -> Tuple[str, str]:
    return encode_base64(raw), resolve_mime_type(raw, declared_type)


class ImageIntakeManager:
    """Own the ordered image collection of a session."""

    def __init__(self, max_file_size: int = MAX_FILE_SIZE_BYTES) -> None:
        self.max_file_size = max_file_size
        self._images: ImageCollection = ()
        self._warnings: List[IntakeWarning] = []
        self._active_batches = 0

    @property
    def images(self) -> ImageCollection:
        return self._images

    @property
    def warnings(self) -> Tuple[IntakeWarning, ...]:
        return tuple(self._warnings)

    def _apply(self, transform: Callable[[ImageCollection], ImageCollection]) -> ImageCollection:
        """Replace the collection with `transform(current)`."""
        self._images = transform(self._images)
        return self._images

    async def ingest(self, files: Iterable[FileInput]) -> IntakeReport:
        """Ingest a batch of files concurrently.

        Args:
            files: File inputs exposing filename, size, content_type and read().

        Returns:
            The records appended by this batch (in input order) and the
            warnings raised for skipped files.

        `warnings` is reset when a batch starts with no other batch in
        flight; warnings of overlapping batches accumulate.
        """
        if not self._active_batches:
            self._warnings = []
        self._active_batches += 1
        warnings: List[IntakeWarning] = []
        try:
            outcomes = await asyncio.gather(*(self._ingest_one(file, warnings) for file in files))
        finally:
            self._active_batches -= 1
        added = tuple(record for record in outcomes if record is not None)
        return IntakeReport(added=added, warnings=tuple(warnings))

    async def _ingest_one(self, file: FileInput, warnings: List[IntakeWarning]) -> Optional[ImageRecord]:
        name = getattr(file, "filename", None) or "upload"
        try:
            record = await self._decode(file, name)
        except GenerationError as exc:
            LOGGER.warning("Skipping %s: %s", name, exc)
            warning = IntakeWarning(kind=exc.kind, filename=name, message=str(exc))
            warnings.append(warning)
            self._warnings.append(warning)
            return None
        self._apply(lambda images: images + (record,))
        LOGGER.debug("Added image %s (%s) as %s", name, record.mime_type, record.id)
        return record

    async def _decode(self, file: FileInput, name: str) -> ImageRecord:
        declared_size = getattr(file, "size", None)
        if exceeds_size_limit(declared_size, self.max_file_size):
            raise FileTooLarge(name, declared_size, self.max_file_size)

        try:
            raw = await file.read()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise FileUnreadable(name, str(exc)) from exc
        if not raw:
            raise FileUnreadable(name, "file is empty")
        if exceeds_size_limit(len(raw), self.max_file_size):
            raise FileTooLarge(name, len(raw), self.max_file_size)

        # base64 and Pillow sniffing are blocking -> run in thread
        try:
            encoded, mime_type = await asyncio.to_thread(_encode, raw, getattr(file, "content_type", None))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise FileUnreadable(name, str(exc)) from exc
        return ImageRecord(
            id=uuid.uuid4().hex,
            encoded_data=encoded,
            mime_type=mime_type,
            original_name=name,
        )

    def remove(self, image_id: str) -> bool:
        """Remove the record with `image_id`; returns False when absent."""
        before = len(self._images)
        after = self._apply(lambda images: tuple(img for img in images if img.id != image_id))
        return len(after) != before

    def clear(self) -> None:
        """Empty the collection."""
        self._apply(lambda images: ())

    def get(self, image_id: str) -> ImageRecord:
        """Return a record or raise KeyError if missing."""
        for image in self._images:
            if image.id == image_id:
                return image
        raise KeyError(f"Image {image_id} not found")
