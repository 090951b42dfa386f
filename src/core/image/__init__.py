"""
Image pipeline stages - functional architecture.

This package provides the pipeline stages as pure functions over owned buffers:
- validation: Upload checks on metadata only (media type, size)
- codec: Decode bytes to RGBA PixelBuffer, encode PixelBuffer to JPEG
- converters: Base64 and data URL conversions
- processors: Aspect ratio preserving downscale
- filters: Per-pixel color filters (class-based strategies)

All stages are re-exported from this module for convenient access.
"""

# Codec functions
from core.image.codec import decode, encode, sniff_container

# Converter functions
from core.image.converters import (
    from_base64,
    parse_data_url,
    to_base64,
    to_data_url,
    upload_from_base64,
    upload_from_data_url,
)

# Filter engine
from core.image.filters import FilterEngine, apply_filter, available_filters

# Processor functions
from core.image.processors import compute_target_size, resize

# Validation functions
from core.image.validation import validate

__all__ = [
    # Validation
    "validate",
    # Codec
    "decode",
    "encode",
    "sniff_container",
    # Converters
    "to_base64",
    "from_base64",
    "to_data_url",
    "parse_data_url",
    "upload_from_base64",
    "upload_from_data_url",
    # Processors
    "compute_target_size",
    "resize",
    # Filters
    "FilterEngine",
    "apply_filter",
    "available_filters",
]
