"""
System-related API models.

This module contains models for system status and limits:
- System status information
- Pipeline limits
"""

from typing import Any, Dict, List

from pydantic import BaseModel


class SystemStatus(BaseModel):
    """System status information"""

    status: str
    uptime: float
    sessions: Dict[str, Any]


class PipelineLimits(BaseModel):
    """Limits applied to uploads and output"""

    max_upload_bytes: int
    max_dimension: int
    brightness_delta: int
    encode_quality: float
    accepted_media_types: List[str]
    output_media_type: str
