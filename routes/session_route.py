"""FastAPI routes for generation sessions."""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from controllers.session_controller import (
	close_session,
	describe_session,
	generate,
	get_session,
	reset_session,
	start_session,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])


class GeneratePayload(BaseModel):
	prompt: str = ""


@router.post("")
async def start_session_route(request: Request):
	try:
		return await start_session(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}")
async def get_session_route(request: Request, session_id: str):
	"""Return the read-only state and image list of a session."""
	return describe_session(get_session(request, session_id))


@router.post("/{session_id}/generate")
async def generate_route(request: Request, session_id: str, payload: GeneratePayload):
	try:
		return await generate(request, session_id, payload.prompt)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/reset")
async def reset_session_route(request: Request, session_id: str):
	try:
		return await reset_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/{session_id}")
async def close_session_route(request: Request, session_id: str):
	try:
		return await close_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
