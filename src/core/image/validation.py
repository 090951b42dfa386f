"""
Upload validation.

Rejects non-image or oversized uploads using metadata only, before any
decode work happens.
"""

import logging

from common.constants import PipelineConstants
from core.exceptions import NotAnImageError, TooLargeError
from domain_types import RawUpload

logger = logging.getLogger(__name__)


def media_category(media_type: str) -> str:
    """Top-level category of a media type ("image" for "image/png")."""
    return media_type.split("/", 1)[0].strip().lower()


def validate(upload: RawUpload, max_bytes: int = PipelineConstants.MAX_UPLOAD_BYTES) -> None:
    """
    Check that an upload is a declared image within the size limit.

    Args:
        upload: Upload to check
        max_bytes: Largest accepted payload; a payload of exactly this size passes

    Raises:
        NotAnImageError: If the media type is not image/*
        TooLargeError: If the declared size exceeds max_bytes
    """
    if media_category(upload.media_type) != "image":
        logger.warning(f"Rejected upload {upload.filename!r}: media type {upload.media_type!r}")
        raise NotAnImageError(upload.media_type)

    if upload.size > max_bytes:
        logger.warning(
            f"Rejected upload {upload.filename!r}: {upload.size} bytes > {max_bytes} bytes"
        )
        raise TooLargeError(upload.size, max_bytes)
