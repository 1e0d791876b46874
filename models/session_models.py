"""Session domain models for image generation workflows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from models.image_record import ImageRecord


class SessionPhase(str, Enum):
	IDLE = "idle"
	SUBMITTING = "submitting"
	SUCCEEDED = "succeeded"
	FAILED = "failed"


@dataclass(frozen=True)
class IntakeWarning:
	"""User-visible warning about a file skipped during intake."""

	kind: str
	filename: str
	message: str


@dataclass(frozen=True)
class IntakeReport:
	"""Outcome of one intake batch."""

	added: Tuple[ImageRecord, ...] = ()
	warnings: Tuple[IntakeWarning, ...] = ()


@dataclass(frozen=True)
class GenerationResult:
	"""A generated image returned by the remote service."""

	data: str
	mime_type: str
	text: Optional[str] = None
	download_name: str = "ai-generated-image.png"

	@property
	def image_data_uri(self) -> str:
		return f"data:{self.mime_type};base64,{self.data}"


@dataclass(frozen=True)
class SessionState:
	"""Read-only snapshot of one generation session.

	`result` is only set while SUCCEEDED and `error_message`/`error_kind`
	only while FAILED.
	"""

	phase: SessionPhase = SessionPhase.IDLE
	result: Optional[GenerationResult] = None
	error_message: Optional[str] = None
	error_kind: Optional[str] = None
	submission_id: int = 0
