"""
Image API Router - Upload and filter operations
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from api.dependencies import get_image_service
from api.exceptions import SuccessMessages, safe_endpoint
from core.image.converters import upload_from_base64, upload_from_data_url
from core.session_manager import SessionSnapshot
from schemas import (
    FilterChangeRequest,
    FilterListResponse,
    ImagePreviewResponse,
    ImageUploadRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def build_preview_response(
    session: SessionSnapshot, start_time: float = None, message: str = None
) -> ImagePreviewResponse:
    """Build the response body for a session's current render."""
    encoded = session.encoded
    original_width, original_height = session.original_size or (None, None)

    processing_time_ms = None
    if start_time is not None:
        processing_time_ms = int((time.time() - start_time) * 1000)

    return ImagePreviewResponse(
        session_id=session.session_id,
        filter=session.filter,
        state=session.state,
        width=encoded.width,
        height=encoded.height,
        original_width=original_width,
        original_height=original_height,
        media_type=encoded.media_type,
        size_bytes=encoded.size,
        image=encoded.to_data_url(),
        processing_time_ms=processing_time_ms,
        message=message,
    )


@router.get("/filters")
@safe_endpoint
async def list_filters(image_service=Depends(get_image_service)) -> FilterListResponse:
    """List the filters that can be applied to an uploaded image."""
    return FilterListResponse(filters=image_service.get_available_filters())


@router.post("/upload")
@safe_endpoint
async def upload_image(
    request: ImageUploadRequest, image_service=Depends(get_image_service)
) -> ImagePreviewResponse:
    """
    Upload an image and render it with the requested filter.

    The image is validated, decoded, downscaled to fit the maximum output size
    and kept in a new session, so later filter changes skip all of that.

    Args:
        request: Upload request with a data URL or a base64 payload
        image_service: Image service dependency

    Returns:
        ImagePreviewResponse with the session id and the encoded preview

    Raises:
        HTTPException 415: If the upload is not an image or not a supported format
        HTTPException 413: If the upload is too large
        HTTPException 422: If the image data is corrupt
    """
    start_time = time.time()

    if request.data_url is not None:
        upload = upload_from_data_url(request.data_url, filename=request.filename)
    else:
        upload = upload_from_base64(
            request.data_base64, request.media_type, filename=request.filename
        )

    session = await run_in_threadpool(image_service.upload, upload, request.filter)

    logger.info(f"Image uploaded: {session.session_id} ({upload.size} bytes)")

    return build_preview_response(session, start_time, SuccessMessages.IMAGE_UPLOADED)


@router.post("/{session_id}/filter")
@safe_endpoint
async def change_filter(
    session_id: str, request: FilterChangeRequest, image_service=Depends(get_image_service)
) -> ImagePreviewResponse:
    """
    Re-render an uploaded image with another filter.

    Only the filter and encode stages run; the stored resized image is reused.
    """
    start_time = time.time()

    session = await run_in_threadpool(image_service.change_filter, session_id, request.filter)

    return build_preview_response(
        session, start_time, SuccessMessages.FILTER_APPLIED.format(filter=request.filter.value)
    )


@router.get("/{session_id}")
@safe_endpoint
async def get_preview(
    session_id: str, image_service=Depends(get_image_service)
) -> ImagePreviewResponse:
    """Get the current render of an uploaded image."""
    session = await run_in_threadpool(image_service.get_preview, session_id)
    return build_preview_response(session)


@router.delete("/{session_id}")
@safe_endpoint
async def clear_image(session_id: str, image_service=Depends(get_image_service)) -> dict:
    """Remove an uploaded image and its session."""
    await run_in_threadpool(image_service.clear, session_id)
    return {"success": True, "session_id": session_id, "message": SuccessMessages.IMAGE_REMOVED}
