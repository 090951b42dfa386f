"""
Image resampling operations.

Handles downscaling of pixel buffers using OpenCV:
- Target size computation (aspect ratio preserving, never upscales)
- Resizing
"""

import logging
import math
from typing import Tuple

import cv2

from common.constants import PipelineConstants
from domain_types import PixelBuffer

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def compute_target_size(
    width: int, height: int, max_width: int, max_height: int
) -> Tuple[int, int]:
    """
    Compute the output size for fitting an image inside max_width x max_height.

    The longer side is clamped first (width wins ties); the other side is
    derived from the same scale factor. Images that already fit keep their size.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        max_width: Maximum output width
        max_height: Maximum output height

    Returns:
        Tuple of (width, height), each at least 1

    Raises:
        ValueError: If any dimension or maximum is not positive
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Source dimensions must be positive, got {width}x{height}")
    if max_width <= 0 or max_height <= 0:
        raise ValueError(f"Maximum dimensions must be positive, got {max_width}x{max_height}")

    new_width, new_height = width, height

    if width >= height:
        if width > max_width:
            new_width = max_width
            new_height = round_half_up(height * max_width / width)
    else:
        if height > max_height:
            new_height = max_height
            new_width = round_half_up(width * max_height / height)

    # Non-square limits: the derived side can still overflow its own maximum
    if new_height > max_height:
        new_height = max_height
        new_width = round_half_up(width * max_height / height)
    if new_width > max_width:
        new_width = max_width
        new_height = round_half_up(height * max_width / width)

    min_dim = PipelineConstants.MIN_DIMENSION
    return (
        max(min_dim, min(new_width, max_width)),
        max(min_dim, min(new_height, max_height)),
    )


def resize(
    buffer: PixelBuffer,
    max_width: int = PipelineConstants.MAX_DIMENSION,
    max_height: int = PipelineConstants.MAX_DIMENSION,
) -> PixelBuffer:
    """
    Downscale a buffer to fit within the given maxima, preserving aspect ratio.

    Args:
        buffer: Source buffer
        max_width: Maximum output width
        max_height: Maximum output height

    Returns:
        The same buffer if it already fits, otherwise a new resized buffer
    """
    target_width, target_height = compute_target_size(
        buffer.width, buffer.height, max_width, max_height
    )

    if (target_width, target_height) == buffer.size:
        logger.debug(f"Buffer {buffer.width}x{buffer.height} already fits, not resizing")
        return buffer

    # INTER_AREA averages source pixels, which is the right choice for downscaling
    resized = cv2.resize(
        buffer.pixels, (target_width, target_height), interpolation=cv2.INTER_AREA
    )

    logger.debug(
        f"Resized {buffer.width}x{buffer.height} to {target_width}x{target_height}"
    )
    return PixelBuffer(resized)
