"""
Shared FastAPI dependencies for the print preview service.
Centralizes common dependencies to eliminate code duplication.
"""

import logging

from fastapi import Depends, HTTPException, Request

from core.pipeline import ImagePipeline
from core.session_manager import ImageSessionManager
from services.image_service import ImageService

logger = logging.getLogger(__name__)


def get_pipeline(request: Request) -> ImagePipeline:
    """
    Get the ImagePipeline instance from app state.

    Raises:
        HTTPException: If the pipeline is not initialized
    """
    try:
        return request.app.state.pipeline
    except AttributeError as e:
        logger.error(f"Pipeline not initialized in app state: {e}")
        raise HTTPException(
            status_code=500, detail="Internal server error: Pipeline not initialized"
        )


def get_session_manager(request: Request) -> ImageSessionManager:
    """
    Get the ImageSessionManager instance from app state.

    Raises:
        HTTPException: If the session manager is not initialized
    """
    try:
        return request.app.state.session_manager
    except AttributeError as e:
        logger.error(f"Session manager not initialized in app state: {e}")
        raise HTTPException(
            status_code=500, detail="Internal server error: Session manager not initialized"
        )


# Service layer dependencies
def get_image_service(
    pipeline: ImagePipeline = Depends(get_pipeline),
    session_manager: ImageSessionManager = Depends(get_session_manager),
) -> ImageService:
    """
    Get image service instance.

    Args:
        pipeline: Pipeline dependency
        session_manager: Session manager dependency

    Returns:
        ImageService instance
    """
    return ImageService(pipeline=pipeline, session_manager=session_manager)
