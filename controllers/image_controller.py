from fastapi import Request, UploadFile, HTTPException
from fastapi.responses import Response
from typing import Dict, Any, List
import asyncio
import base64

from controllers.session_controller import describe_session, get_session
from services.thumbnail_generator import ThumbnailGenerator


async def upload_images(request: Request, session_id: str, files: List[UploadFile]) -> Dict[str, Any]:
    """Ingest a batch of uploaded images into a session.

    Args:
        request: FastAPI Request object (used to access app.state for the session store).
        session_id: Target session id.
        files: Uploaded files; each one is validated and encoded independently.

    Returns:
        A dict containing the ids of the added images, per-file warnings and
        the updated session description.
    """
    session = get_session(request, session_id)
    if not files:
        raise HTTPException(status_code=400, detail="At least one file is required.")

    report = await session.add_images(files)

    return {
        "added": [image.id for image in report.added],
        "warnings": [
            {"kind": warning.kind, "filename": warning.filename, "message": warning.message}
            for warning in report.warnings
        ],
        "session": describe_session(session),
    }


async def remove_image(request: Request, session_id: str, image_id: str) -> Dict[str, Any]:
    """Remove one image from the session; unknown ids are a 404."""
    session = get_session(request, session_id)
    if not session.remove_image(image_id):
        raise HTTPException(status_code=404, detail="Image not found")
    return describe_session(session)


async def clear_images(request: Request, session_id: str) -> Dict[str, Any]:
    """Remove every image from the session."""
    session = get_session(request, session_id)
    session.clear_images()
    return describe_session(session)


async def get_thumbnail(request: Request, session_id: str, image_id: str) -> Response:
    """Controller to render a PNG preview of one uploaded image.

    Raises:
        HTTPException(404) if the image is not in the session.
        HTTPException(422) if the stored payload is not a decodable image.
    """
    session = get_session(request, session_id)
    try:
        record = session.intake.get(image_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Image not found") from exc

    try:
        png_bytes = await asyncio.to_thread(ThumbnailGenerator().create_thumbnail, record)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return Response(content=png_bytes, media_type="image/png")


async def get_result(request: Request, session_id: str) -> Response:
    """Return the generated image bytes of a succeeded session."""
    session = get_session(request, session_id)
    result = session.state.result
    if result is None:
        raise HTTPException(status_code=404, detail="No generated image available")

    return Response(
        content=base64.b64decode(result.data),
        media_type=result.mime_type,
        headers={"Content-Disposition": f'inline; filename="{result.download_name}"'},
    )
