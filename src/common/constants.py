"""
Constants and configuration values for the print preview pipeline.
Centralizes all magic numbers and configuration constants.
"""


# Pipeline Constants
class PipelineConstants:
    """Limits applied by the image ingestion pipeline."""

    # Upload limits
    MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5 MiB, equal size passes
    ACCEPTED_MEDIA_TYPES = ["image/jpeg", "image/png", "image/gif", "image/webp"]

    # Output geometry
    MAX_DIMENSION = 800  # longer side, pixels
    MIN_DIMENSION = 1

    # Filters
    BRIGHTNESS_DELTA = 30
    CHANNEL_MAX = 255

    # Encoding
    ENCODE_QUALITY = 0.85  # [0, 1] scale
    OUTPUT_MEDIA_TYPE = "image/jpeg"
    OUTPUT_EXTENSION = ".jpg"


# Session Constants
class SessionConstants:
    """Constants for image session storage."""

    DEFAULT_MAX_SESSIONS = 100
    MIN_SESSIONS = 1
    MAX_SESSIONS = 10000


# API Constants
class APIConstants:
    """Constants for API endpoints."""

    DEFAULT_HOST = "0.0.0.0"
    DEFAULT_PORT = 8000


# System Constants
class SystemConstants:
    """Constants for system operations."""

    # Logging
    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
