from __future__ import annotations

import base64
from dataclasses import dataclass


@dataclass(frozen=True)
class ImageRecord:
    """In-memory representation of one uploaded source image.

    Attributes:
        id: Opaque unique token used for removal.
        encoded_data: Base64 payload only, never prefixed with a data-URL header.
        mime_type: MIME type resolved at intake (e.g. image/png).
        original_name: Filename the image was uploaded under.
    """

    id: str
    encoded_data: str
    mime_type: str
    original_name: str

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.encoded_data}"

    def decoded_bytes(self) -> bytes:
        return base64.b64decode(self.encoded_data)
