"""
System API Router - Status and limits
"""

import logging
import time

from fastapi import APIRouter, Depends

from api.dependencies import get_pipeline, get_session_manager
from api.exceptions import safe_endpoint
from common.constants import PipelineConstants
from schemas import PipelineLimits, SystemStatus

logger = logging.getLogger(__name__)

router = APIRouter()

# Track start time
START_TIME = time.time()


@router.get("/status")
@safe_endpoint
async def get_status(session_manager=Depends(get_session_manager)) -> SystemStatus:
    """Get system status"""
    return SystemStatus(
        status="healthy",
        uptime=time.time() - START_TIME,
        sessions=session_manager.get_stats(),
    )


@router.get("/limits")
@safe_endpoint
async def get_limits(pipeline=Depends(get_pipeline)) -> PipelineLimits:
    """Get the limits applied to uploads and output"""
    return PipelineLimits(
        max_upload_bytes=pipeline.max_upload_bytes,
        max_dimension=max(pipeline.max_width, pipeline.max_height),
        brightness_delta=pipeline.brightness_delta,
        encode_quality=pipeline.encode_quality,
        accepted_media_types=PipelineConstants.ACCEPTED_MEDIA_TYPES,
        output_media_type=PipelineConstants.OUTPUT_MEDIA_TYPE,
    )
