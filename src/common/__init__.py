"""
Types package - fundamental types without project dependencies.

This package contains basic types that are used throughout the system:
- Enums (FilterKind, PipelineStage, SessionState, ErrorKind)
- Constants (PipelineConstants, SessionConstants, ...)

IMPORTANT: This package must NOT import from any other project packages
(schemas, core, services, api) to avoid circular dependencies.
"""

# Export all constants
from common.constants import APIConstants, PipelineConstants, SessionConstants, SystemConstants

# Export all enums
from common.enums import ErrorKind, FilterKind, PipelineStage, SessionState

__all__ = [
    # Enums
    "ErrorKind",
    "FilterKind",
    "PipelineStage",
    "SessionState",
    # Constants
    "APIConstants",
    "PipelineConstants",
    "SessionConstants",
    "SystemConstants",
]
