from typing import List

from fastapi import APIRouter, File, HTTPException, Request, UploadFile

from controllers.image_controller import clear_images, get_result, get_thumbnail, remove_image, upload_images

router = APIRouter(prefix="/sessions/{session_id}", tags=["images"])


@router.post("/images", summary="Add source images to a session")
async def upload_images_route(request: Request, session_id: str, files: List[UploadFile] = File(...)):
	"""Ingest uploaded images; oversized or unreadable files come back as warnings."""
	try:
		return await upload_images(request, session_id, files)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/images/{image_id}")
async def remove_image_route(request: Request, session_id: str, image_id: str):
	try:
		return await remove_image(request, session_id, image_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/images")
async def clear_images_route(request: Request, session_id: str):
	try:
		return await clear_images(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/images/{image_id}/thumbnail")
async def get_image_thumbnail(request: Request, session_id: str, image_id: str):
	"""Return the PNG thumbnail bytes for the specified image id."""
	try:
		return await get_thumbnail(request, session_id, image_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/result")
async def get_result_route(request: Request, session_id: str):
	"""Return the generated image of a succeeded session."""
	try:
		return await get_result(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
