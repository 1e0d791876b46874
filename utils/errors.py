"""Error taxonomy for image intake and generation.

Every error carries a machine-readable `kind` (the class name) alongside its
human-readable message so callers can branch without string matching.
"""

from __future__ import annotations

from typing import Optional


class GenerationError(Exception):
    """Base class for all intake and generation failures."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class ValidationError(GenerationError, ValueError):
    """Raised when a submission has neither a prompt nor any image."""


class FileTooLarge(GenerationError, ValueError):
    """A single uploaded file exceeds the intake size ceiling."""

    def __init__(self, filename: str, size: int, limit: int) -> None:
        super().__init__(f'File "{filename}" exceeds the {limit // (1024 * 1024)}MB limit and was skipped.')
        self.filename = filename
        self.size = size
        self.limit = limit


class FileUnreadable(GenerationError):
    """A single uploaded file could not be read."""

    def __init__(self, filename: str, reason: Optional[str] = None) -> None:
        super().__init__(f"Failed to read file: {filename}.")
        self.filename = filename
        self.reason = reason


class TransportError(GenerationError):
    """Network or HTTP status failure talking to the remote service."""


class RequestFailed(TransportError):
    """All retry attempts were exhausted.

    Attributes:
        attempts: Number of attempts that were issued.
        last_error: Description of the last observed failure.
        status_code: HTTP status of the last attempt, if a response was received.
    """

    def __init__(self, attempts: int, last_error: str, status_code: Optional[int] = None) -> None:
        super().__init__(last_error)
        self.attempts = attempts
        self.last_error = last_error
        self.status_code = status_code

    @property
    def kind(self) -> str:
        return "TransportError"


class EmptyResponseError(GenerationError):
    """The remote service answered successfully but returned no image data."""


class InvalidTransition(GenerationError, RuntimeError):
    """A session state change that the state machine does not allow."""
