"""
Centralized enums for the print preview pipeline.

This module contains all enumeration types used throughout the system,
providing a single source of truth for enum definitions.
"""

from enum import Enum


class FilterKind(str, Enum):
    """Color filters that can be applied to a resized image."""

    NORMAL = "normal"
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    VINTAGE = "vintage"
    BRIGHT = "bright"


class PipelineStage(str, Enum):
    """Stages of the ingestion pipeline, in execution order."""

    VALIDATE = "validate"
    DECODE = "decode"
    RESIZE = "resize"
    FILTER = "filter"
    ENCODE = "encode"


class SessionState(str, Enum):
    """Lifecycle of a single uploaded image."""

    EMPTY = "empty"
    VALIDATED = "validated"
    DECODED = "decoded"
    RESIZED = "resized"
    FILTERED = "filtered"
    ENCODED = "encoded"


class ErrorKind(str, Enum):
    """Failure kinds reported by the pipeline."""

    NOT_AN_IMAGE = "not_an_image"
    TOO_LARGE = "too_large"
    UNSUPPORTED_FORMAT = "unsupported_format"
    CORRUPT_DATA = "corrupt_data"
    ENCODE_FAILURE = "encode_failure"
    PROCESSING_FAILURE = "processing_failure"
