"""Utilities to build multimodal generateContent payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from models.image_record import ImageRecord
from utils.errors import ValidationError

MISSING_INPUT_MESSAGE = "Please enter a descriptive prompt or upload at least one image."
RESPONSE_MODALITIES = ("TEXT", "IMAGE")


def validate_inputs(prompt_text: str, images: Sequence[ImageRecord]) -> None:
    """Raise ValidationError when there is neither a prompt nor an image."""
    if not (prompt_text or "").strip() and not images:
        raise ValidationError(MISSING_INPUT_MESSAGE)


def build_parts(prompt_text: str, images: Iterable[ImageRecord]) -> List[Dict[str, Any]]:
    """Prompt text part first (even when empty), then one inline part per image."""
    parts: List[Dict[str, Any]] = [{"text": prompt_text or ""}]
    for image in images:
        parts.append({"inlineData": {"mimeType": image.mime_type, "data": image.encoded_data}})
    return parts


def build_request(prompt_text: str, images: Sequence[ImageRecord]) -> Dict[str, Any]:
    """Build the request body for one generation call.

    Args:
        prompt_text: The creative instruction; may be empty when images are given.
        images: Source images in collection order.

    Returns:
        A JSON-serializable dict for the generateContent endpoint.

    Raises:
        ValidationError: If the prompt is blank and no images were supplied.
    """
    validate_inputs(prompt_text, images)
    return {
        "contents": [{"role": "user", "parts": build_parts(prompt_text, images)}],
        "generationConfig": {"responseModalities": list(RESPONSE_MODALITIES)},
    }


@dataclass(frozen=True)
class GenerationRequest:
    """Immutable snapshot of one submission's inputs."""

    prompt_text: str
    images: Tuple[ImageRecord, ...]

    @classmethod
    def snapshot(cls, prompt_text: str, images: Iterable[ImageRecord]) -> "GenerationRequest":
        return cls(prompt_text=prompt_text or "", images=tuple(images))

    def to_body(self) -> Dict[str, Any]:
        return build_request(self.prompt_text, self.images)
