"""Session lifecycle helpers for image generation workflows."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import HTTPException, Request

from models.session_models import SessionState
from services.generation_session import GenerationSessionController
from services.session_store import SessionStore
from utils.errors import InvalidTransition


def _get_store(request: Request) -> SessionStore:
	store = getattr(request.app.state, "session_store", None)
	if store is None:
		raise HTTPException(status_code=500, detail="Session store unavailable")
	return store


def get_session(request: Request, session_id: str) -> GenerationSessionController:
	"""Return the session or raise a 404."""
	try:
		return _get_store(request).get(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc


def serialize_state(state: SessionState) -> Dict[str, Any]:
	"""Render a session state for clients; the image payload is not inlined."""
	result = None
	if state.result is not None:
		result = {
			"mime_type": state.result.mime_type,
			"download_name": state.result.download_name,
			"text": state.result.text,
		}
	return {
		"phase": state.phase.value,
		"submission_id": state.submission_id,
		"result": result,
		"error_message": state.error_message,
		"error_kind": state.error_kind,
	}


def describe_session(session: GenerationSessionController) -> Dict[str, Any]:
	"""Return state, image list and intake warnings for one session."""
	return {
		"session_id": session.session_id,
		"state": serialize_state(session.state),
		"images": [
			{"id": image.id, "name": image.original_name, "mime_type": image.mime_type}
			for image in session.images
		],
		"warnings": [warning.message for warning in session.warnings],
	}


async def start_session(request: Request) -> Dict[str, Any]:
	"""Create a new generation session and return its description."""
	session = _get_store(request).create()
	return describe_session(session)


async def generate(request: Request, session_id: str, prompt: str) -> Dict[str, Any]:
	"""Submit the prompt with the session's current images."""
	session = get_session(request, session_id)
	state = await session.submit(prompt)
	return {"session_id": session_id, "state": serialize_state(state)}


async def reset_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Return a finished session to idle."""
	session = get_session(request, session_id)
	try:
		state = session.reset()
	except InvalidTransition as exc:
		raise HTTPException(status_code=409, detail=str(exc)) from exc
	return {"session_id": session_id, "state": serialize_state(state)}


async def close_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Tear down a session, discarding any pending submission."""
	try:
		_get_store(request).discard(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc
	return {"session_id": session_id, "closed": True}
