"""Helpers to parse generateContent outputs."""

from typing import Any, Dict, List, Optional

DEFAULT_OUTPUT_MIME_TYPE = "image/png"


def _first_candidate_parts(response: Any) -> List[Dict[str, Any]]:
    # Unexpected shapes at any level read as "no parts".
    if not isinstance(response, dict):
        return []
    candidates = response.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return []
    candidate = candidates[0]
    if not isinstance(candidate, dict):
        return []
    content = candidate.get("content")
    if not isinstance(content, dict):
        return []
    parts = content.get("parts")
    if not isinstance(parts, list):
        return []
    return [part for part in parts if isinstance(part, dict)]


def extract_inline_image(response: Any) -> Optional[Dict[str, str]]:
    """Return the first inline-data part as {"mime_type", "data"}, or None."""
    for part in _first_candidate_parts(response):
        inline = part.get("inlineData") or part.get("inline_data")
        if not isinstance(inline, dict):
            continue
        data = inline.get("data")
        if isinstance(data, str) and data:
            mime_type = inline.get("mimeType") or inline.get("mime_type")
            if not isinstance(mime_type, str) or not mime_type:
                mime_type = DEFAULT_OUTPUT_MIME_TYPE
            return {"mime_type": mime_type, "data": data}
    return None


def extract_text(response: Any) -> Optional[str]:
    """Join any text parts of the first candidate, if present."""
    texts = [part["text"] for part in _first_candidate_parts(response) if isinstance(part.get("text"), str) and part["text"]]
    return "\n".join(texts) if texts else None
