"""
Schemas Package

This package contains all Pydantic schemas for request validation and
response serialization, organized by domain.

Note: "schemas" (not "models") follows FastAPI best practices:
- schemas/ = Pydantic models for validation/serialization
- domain_types = values passed between pipeline stages
"""

# Re-export enums for convenience
from common.enums import FilterKind, SessionState

from schemas.image import (
    FilterChangeRequest,
    FilterListResponse,
    ImagePreviewResponse,
    ImageUploadRequest,
)
from schemas.system import PipelineLimits, SystemStatus

__all__ = [
    "FilterKind",
    "SessionState",
    "FilterChangeRequest",
    "FilterListResponse",
    "ImagePreviewResponse",
    "ImageUploadRequest",
    "PipelineLimits",
    "SystemStatus",
]
