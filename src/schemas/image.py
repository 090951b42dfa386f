"""
Image API models.

This module contains models for preview image operations:
- Upload requests (data URL or bare base64 payload)
- Filter change requests
- Preview responses
"""

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from common.enums import FilterKind, SessionState


class ImageUploadRequest(BaseModel):
    """Request to upload an image, either as a data URL or as base64 with a media type"""

    data_url: Optional[str] = Field(
        default=None, description="data:<media type>;base64,<payload> as read by FileReader"
    )
    data_base64: Optional[str] = Field(default=None, description="Bare base64 payload")
    media_type: Optional[str] = Field(
        default=None, description="Declared media type, required with data_base64"
    )
    filename: Optional[str] = Field(default=None, description="Original file name")
    filter: FilterKind = Field(default=FilterKind.NORMAL, description="Filter for first render")

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def check_payload(self):
        """Require exactly one payload form."""
        if (self.data_url is None) == (self.data_base64 is None):
            raise ValueError("Provide exactly one of data_url or data_base64")
        if self.data_base64 is not None and not self.media_type:
            raise ValueError("media_type is required with data_base64")
        return self


class FilterChangeRequest(BaseModel):
    """Request to re-render an uploaded image with another filter"""

    filter: FilterKind = Field(..., description="Filter to apply")

    model_config = {"extra": "forbid"}


class ImagePreviewResponse(BaseModel):
    """Current render of an image session"""

    session_id: str
    filter: FilterKind
    state: SessionState
    width: int
    height: int
    original_width: Optional[int] = None
    original_height: Optional[int] = None
    media_type: str
    size_bytes: int
    image: str = Field(..., description="Encoded image as a data URL")
    processing_time_ms: Optional[int] = None
    message: Optional[str] = None


class FilterListResponse(BaseModel):
    """Available filters"""

    filters: List[FilterKind]
    default: FilterKind = FilterKind.NORMAL
