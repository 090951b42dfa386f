"""
Exception hierarchy for the print preview pipeline.

Every pipeline failure carries the stage that produced it and a failure kind,
so callers can build user-facing messages without parsing strings. The
status_code attribute is what the HTTP layer responds with.
"""

from typing import Dict, Optional

from common.enums import ErrorKind, PipelineStage


class PreviewException(Exception):
    """Base exception for the print preview service."""

    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class PipelineError(PreviewException):
    """Failure raised by one of the pipeline stages."""

    stage: PipelineStage
    kind: ErrorKind

    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict] = None):
        details = dict(details or {})
        details.setdefault("stage", self.stage.value)
        details.setdefault("kind", self.kind.value)
        super().__init__(message=message, status_code=status_code, details=details)


# Validator


class ValidationFailure(PipelineError):
    """Upload rejected before any decode work."""

    stage = PipelineStage.VALIDATE


class NotAnImageError(ValidationFailure):
    """Declared media type is not in the image/* category."""

    kind = ErrorKind.NOT_AN_IMAGE

    def __init__(self, media_type: str):
        super().__init__(
            message=f"File must be an image, got media type '{media_type}'",
            status_code=415,
            details={"media_type": media_type},
        )


class TooLargeError(ValidationFailure):
    """Upload exceeds the maximum accepted size."""

    kind = ErrorKind.TOO_LARGE

    def __init__(self, size: int, limit: int):
        super().__init__(
            message=f"Image size {size} bytes exceeds the {limit} byte limit",
            status_code=413,
            details={"size": size, "limit": limit},
        )


# Decoder


class DecodeFailure(PipelineError):
    """Upload bytes could not be turned into a pixel buffer."""

    stage = PipelineStage.DECODE


class UnsupportedFormatError(DecodeFailure):
    """Bytes are not a recognised raster image container."""

    kind = ErrorKind.UNSUPPORTED_FORMAT

    def __init__(self, reason: str):
        super().__init__(
            message=f"Unsupported image format: {reason}",
            status_code=415,
            details={"reason": reason},
        )


class CorruptDataError(DecodeFailure):
    """Container was recognised but its pixel grid could not be materialised."""

    kind = ErrorKind.CORRUPT_DATA

    def __init__(self, container: str, reason: str):
        super().__init__(
            message=f"Corrupt {container} data: {reason}",
            status_code=422,
            details={"container": container, "reason": reason},
        )


# Encoder


class EncodeFailureError(PipelineError):
    """Encoder could not produce an output payload."""

    stage = PipelineStage.ENCODE
    kind = ErrorKind.ENCODE_FAILURE

    def __init__(self, reason: str):
        super().__init__(
            message=f"Failed to encode image: {reason}",
            status_code=500,
            details={"reason": reason},
        )


# Any stage


class ProcessingFailureError(PipelineError):
    """Unexpected failure inside a stage that has no failure kind of its own."""

    kind = ErrorKind.PROCESSING_FAILURE

    def __init__(self, stage: PipelineStage, reason: str):
        self.stage = PipelineStage(stage)
        super().__init__(
            message=f"Image processing failed at {self.stage.value}: {reason}",
            status_code=500,
            details={"reason": reason},
        )


# Sessions


class SessionNotFoundError(PreviewException):
    """No image session is stored under the given id."""

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Image session not found: {session_id}",
            status_code=404,
            details={"session_id": session_id},
        )
