"""
Core modules for the print preview pipeline
"""

from common.enums import FilterKind

from .pipeline import ImagePipeline, PipelineResult
from .session_manager import ImageSession, ImageSessionManager, SessionSnapshot

__all__ = [
    "FilterKind",
    "ImagePipeline",
    "PipelineResult",
    "ImageSession",
    "ImageSessionManager",
    "SessionSnapshot",
]
