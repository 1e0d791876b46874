"""Static configuration for the Gemini image generation endpoint.

Values are read from the environment (a `.env` file is loaded at app
startup) when `GeminiSettings.from_env()` is called, not at import time.
"""

import os
from dataclasses import dataclass
from typing import Dict

DEFAULT_MODEL = "gemini-2.5-flash-image-preview"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


@dataclass(frozen=True)
class GeminiSettings:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    max_attempts: int = 5
    timeout_seconds: float = 120.0

    @classmethod
    def from_env(cls) -> "GeminiSettings":
        return cls(
            api_key=os.getenv("GEMINI_API_KEY", ""),
            model=os.getenv("GEMINI_IMAGE_MODEL", DEFAULT_MODEL),
            api_base=os.getenv("GEMINI_API_BASE", DEFAULT_API_BASE),
            max_attempts=int(os.getenv("GENERATION_MAX_ATTEMPTS", "5")),
            timeout_seconds=float(os.getenv("GENERATION_TIMEOUT_SECONDS", "120")),
        )

    @property
    def endpoint(self) -> str:
        """The generateContent URL for the configured model."""
        return f"{self.api_base.rstrip('/')}/models/{self.model}:generateContent"

    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-goog-api-key"] = self.api_key
        return headers
