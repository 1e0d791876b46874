"""Builders and fakes shared across tests."""

import io
from typing import Any, Dict, List, Optional

from PIL import Image


def make_png(width: int = 2, height: int = 2, color=(255, 0, 0)) -> bytes:
    """Return PNG bytes of a solid-color image."""
    out = io.BytesIO()
    Image.new("RGB", (width, height), color).save(out, format="PNG")
    return out.getvalue()


def image_response(data: str = "aW1hZ2U=", mime_type: Optional[str] = "image/png", text: Optional[str] = None) -> Dict[str, Any]:
    """Build a generateContent success body carrying one inline image."""
    inline: Dict[str, Any] = {"data": data}
    if mime_type is not None:
        inline["mimeType"] = mime_type
    parts: List[Dict[str, Any]] = []
    if text is not None:
        parts.append({"text": text})
    parts.append({"inlineData": inline})
    return {"candidates": [{"content": {"role": "model", "parts": parts}}]}


def text_only_response(text: str = "I cannot draw that.") -> Dict[str, Any]:
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


class FakeHttpClient:
    """Stand-in for BackoffHttpClient that replays queued outcomes.

    Each queued item is a response dict, an exception to raise, or a
    `(asyncio.Event, outcome)` pair that blocks until the event is set.
    """

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes = list(outcomes)
        self.calls: List[Dict[str, Any]] = []

    async def execute(self, endpoint: str, request_body: Dict[str, Any], max_attempts: int = 5) -> Any:
        self.calls.append({"endpoint": endpoint, "body": request_body, "max_attempts": max_attempts})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, tuple):
            gate, outcome = outcome
            await gate.wait()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome
