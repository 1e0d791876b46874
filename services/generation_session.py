"""Generation session controller.

Owns one session's state machine and image collection:

    IDLE -> SUBMITTING -> SUCCEEDED | FAILED -> (reset) IDLE

A submit from any terminal phase re-enters SUBMITTING. Input validation runs
before any network call; a blank prompt with no images goes straight to
FAILED.

Concurrent submissions follow a supersede policy: every submit takes a new
submission token, and a pending submission whose token is no longer current
has its eventual outcome discarded. `close()` supersedes whatever is pending
the same way.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Tuple
from uuid import uuid4

from models.file_input import FileInput
from models.image_record import ImageRecord
from models.session_models import (
	GenerationResult,
	IntakeReport,
	IntakeWarning,
	SessionPhase,
	SessionState,
)
from services.gemini.config import GeminiSettings
from services.gemini.request_builder import GenerationRequest
from services.gemini.response_parser import extract_inline_image, extract_text
from services.image_intake import ImageIntakeManager
from utils.errors import EmptyResponseError, GenerationError, InvalidTransition, RequestFailed

LOGGER = logging.getLogger(__name__)

EMPTY_RESPONSE_MESSAGE = "Image generation failed: No image data received."
TRANSPORT_FAILURE_PREFIX = "Failed to generate image. Please try a different prompt and/or image(s). Error: "

ALLOWED_TRANSITIONS = {
	SessionPhase.IDLE: {SessionPhase.SUBMITTING, SessionPhase.FAILED},
	SessionPhase.SUBMITTING: {SessionPhase.SUBMITTING, SessionPhase.SUCCEEDED, SessionPhase.FAILED},
	SessionPhase.SUCCEEDED: {SessionPhase.SUBMITTING, SessionPhase.FAILED, SessionPhase.IDLE},
	SessionPhase.FAILED: {SessionPhase.SUBMITTING, SessionPhase.FAILED, SessionPhase.IDLE},
}


class GenerationSessionController:
	"""Coordinate intake, request building and the remote call for one session."""

	def __init__(
		self,
		http_client,
		settings: Optional[GeminiSettings] = None,
		intake: Optional[ImageIntakeManager] = None,
		session_id: Optional[str] = None,
	) -> None:
		"""Create a session controller.

		Args:
			http_client: Object exposing `async execute(endpoint, body, max_attempts)`,
				normally a BackoffHttpClient.
			settings: Endpoint and retry configuration.
			intake: Image intake manager; a fresh one is created when omitted.
			session_id: Optional fixed id; a random hex id otherwise.
		"""
		if http_client is None:
			raise ValueError("HTTP client must be provided.")
		self.http_client = http_client
		self.settings = settings or GeminiSettings()
		self.intake = intake or ImageIntakeManager()
		self.session_id = session_id or uuid4().hex
		self._state = SessionState()
		self._current_submission = 0
		self.closed = False

	@property
	def state(self) -> SessionState:
		return self._state

	@property
	def images(self) -> Tuple[ImageRecord, ...]:
		return self.intake.images

	@property
	def warnings(self) -> Tuple[IntakeWarning, ...]:
		return self.intake.warnings

	async def add_images(self, files: Iterable[FileInput]) -> IntakeReport:
		return await self.intake.ingest(files)

	def remove_image(self, image_id: str) -> bool:
		return self.intake.remove(image_id)

	def clear_images(self) -> None:
		self.intake.clear()

	async def submit(self, prompt_text: str) -> SessionState:
		"""Run one generation for `prompt_text` plus the current images.

		Returns:
			The session state once this submission settles. If a newer
			submission superseded this one, the newer submission's state is
			returned instead and this one's outcome is dropped.
		"""
		self._ensure_open()
		self._current_submission += 1
		token = self._current_submission

		request = GenerationRequest.snapshot(prompt_text, self.intake.images)
		try:
			body = request.to_body()
		except GenerationError as exc:
			LOGGER.info("Session %s: rejected submission %d: %s", self.session_id, token, exc)
			self._fail(exc, token)
			return self._state

		self._transition(SessionPhase.SUBMITTING, submission_id=token)
		LOGGER.info(
			"Session %s: submission %d with %d image(s)", self.session_id, token, len(request.images)
		)

		try:
			response = await self.http_client.execute(
				self.settings.endpoint, body, max_attempts=self.settings.max_attempts
			)
			result = self._interpret(response, request)
		except GenerationError as exc:
			if self._is_current(token):
				self._fail(exc, token)
			return self._state
		except Exception as exc:  # pylint: disable=broad-exception-caught
			LOGGER.exception("Session %s: unexpected error in submission %d", self.session_id, token)
			if self._is_current(token):
				self._transition(
					SessionPhase.FAILED,
					error_message=TRANSPORT_FAILURE_PREFIX + str(exc),
					error_kind=type(exc).__name__,
					submission_id=token,
				)
			return self._state

		if self._is_current(token):
			self._transition(SessionPhase.SUCCEEDED, result=result, submission_id=token)
		return self._state

	def reset(self) -> SessionState:
		"""Return a finished session to IDLE."""
		self._transition(SessionPhase.IDLE, submission_id=self._state.submission_id)
		return self._state

	def close(self) -> None:
		"""Tear the session down; any pending submission's outcome is discarded."""
		self._current_submission += 1
		self.closed = True

	def _interpret(self, response: Dict[str, Any], request: GenerationRequest) -> GenerationResult:
		inline = extract_inline_image(response)
		if inline is None:
			raise EmptyResponseError(EMPTY_RESPONSE_MESSAGE)
		download_name = "ai-edited-image.png" if request.images else "ai-generated-image.png"
		return GenerationResult(
			data=inline["data"],
			mime_type=inline["mime_type"],
			text=extract_text(response),
			download_name=download_name,
		)

	def _is_current(self, token: int) -> bool:
		if token == self._current_submission:
			return True
		LOGGER.info("Session %s: discarding outcome of superseded submission %d", self.session_id, token)
		return False

	def _fail(self, exc: GenerationError, token: int) -> None:
		message = str(exc)
		if isinstance(exc, RequestFailed):
			message = TRANSPORT_FAILURE_PREFIX + message
		self._transition(SessionPhase.FAILED, error_message=message, error_kind=exc.kind, submission_id=token)

	def _transition(
		self,
		phase: SessionPhase,
		*,
		result: Optional[GenerationResult] = None,
		error_message: Optional[str] = None,
		error_kind: Optional[str] = None,
		submission_id: int,
	) -> None:
		current = self._state.phase
		if phase not in ALLOWED_TRANSITIONS[current]:
			raise InvalidTransition(f"Cannot move session from {current.value} to {phase.value}.")
		self._state = SessionState(
			phase=phase,
			result=result,
			error_message=error_message,
			error_kind=error_kind,
			submission_id=submission_id,
		)

	def _ensure_open(self) -> None:
		if self.closed:
			raise RuntimeError("Session is closed; start a new session.")
