"""
Per-pixel color filters.

This module provides the color filters offered in the preview using the
Strategy pattern. Each filter is a separate class registered under its
FilterKind; the engine looks filters up by kind, so an unknown filter can
only come from converting an outside string to FilterKind, which fails early.

Filters work on the RGB channels as float32, then clamp to 255 and round
back to uint8. Alpha is copied through untouched. Filters are never chained:
each application starts from the buffer it is given.

Usage:
    engine = FilterEngine()
    sepia = engine.apply(buffer, FilterKind.SEPIA)
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Union

import numpy as np

from common.constants import PipelineConstants
from common.enums import FilterKind
from domain_types import PixelBuffer

logger = logging.getLogger(__name__)

CHANNEL_MAX = float(PipelineConstants.CHANNEL_MAX)


class ColorFilter(ABC):
    """Abstract base class for color filters."""

    @property
    @abstractmethod
    def kind(self) -> FilterKind:
        """Filter kind this strategy implements."""
        pass

    @abstractmethod
    def transform(self, rgb: np.ndarray) -> np.ndarray:
        """
        Transform RGB samples.

        Args:
            rgb: float32 array of shape (height, width, 3), values in [0, 255]

        Returns:
            float32 array of the same shape; values above 255 are clamped by the caller
        """
        pass

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        """Apply the filter, returning a new buffer with alpha preserved."""
        pixels = buffer.copy_pixels()
        rgb = pixels[:, :, :3].astype(np.float32)

        # Only the upper bound is clamped: every filter here has non-negative coefficients
        result = np.minimum(self.transform(rgb), CHANNEL_MAX)
        pixels[:, :, :3] = np.rint(result).astype(np.uint8)

        return PixelBuffer(pixels)


class NormalFilter(ColorFilter):
    """Identity transform."""

    @property
    def kind(self) -> FilterKind:
        return FilterKind.NORMAL

    def transform(self, rgb: np.ndarray) -> np.ndarray:
        return rgb

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return PixelBuffer(buffer.copy_pixels())


class GrayscaleFilter(ColorFilter):
    """Replace each channel with the unweighted mean of R, G and B."""

    @property
    def kind(self) -> FilterKind:
        return FilterKind.GRAYSCALE

    def transform(self, rgb: np.ndarray) -> np.ndarray:
        avg = rgb.sum(axis=2, keepdims=True) / 3.0
        return np.repeat(avg, 3, axis=2)


class SepiaFilter(ColorFilter):
    """Classic sepia tone matrix."""

    MATRIX = np.array(
        [
            [0.393, 0.769, 0.189],
            [0.349, 0.686, 0.168],
            [0.272, 0.534, 0.131],
        ],
        dtype=np.float32,
    )

    @property
    def kind(self) -> FilterKind:
        return FilterKind.SEPIA

    def transform(self, rgb: np.ndarray) -> np.ndarray:
        return rgb @ self.MATRIX.T


class VintageFilter(ColorFilter):
    """Fade each channel and lift the blacks."""

    SCALE = np.array([0.9, 0.7, 0.5], dtype=np.float32)
    OFFSET = 20.0

    @property
    def kind(self) -> FilterKind:
        return FilterKind.VINTAGE

    def transform(self, rgb: np.ndarray) -> np.ndarray:
        return rgb * self.SCALE + self.OFFSET


class BrightFilter(ColorFilter):
    """Add a constant to every channel."""

    def __init__(self, delta: int = PipelineConstants.BRIGHTNESS_DELTA):
        if delta < 0:
            raise ValueError(f"Brightness delta must be non-negative, got {delta}")
        self.delta = float(delta)

    @property
    def kind(self) -> FilterKind:
        return FilterKind.BRIGHT

    def transform(self, rgb: np.ndarray) -> np.ndarray:
        return rgb + self.delta


class FilterEngine:
    """
    Registry of color filters keyed by FilterKind.

    Every FilterKind must have exactly one filter registered.
    """

    def __init__(self, brightness_delta: int = PipelineConstants.BRIGHTNESS_DELTA):
        """
        Initialize engine with one filter per kind.

        Args:
            brightness_delta: Amount added to each channel by the bright filter
        """
        filters: List[ColorFilter] = [
            NormalFilter(),
            GrayscaleFilter(),
            SepiaFilter(),
            VintageFilter(),
            BrightFilter(brightness_delta),
        ]
        self.filters: Dict[FilterKind, ColorFilter] = {f.kind: f for f in filters}

        missing = set(FilterKind) - set(self.filters)
        if missing:
            raise RuntimeError(f"No filter registered for: {sorted(k.value for k in missing)}")

    def apply(self, buffer: PixelBuffer, kind: Union[FilterKind, str]) -> PixelBuffer:
        """
        Apply one filter to every pixel of a buffer.

        Args:
            buffer: Source buffer, left unchanged
            kind: Filter to apply (FilterKind or its string value)

        Returns:
            New buffer with identical dimensions

        Raises:
            ValueError: If kind is a string that names no filter
        """
        kind = FilterKind(kind)
        result = self.filters[kind].apply(buffer)
        logger.debug(f"Applied {kind.value} filter to {buffer.width}x{buffer.height} buffer")
        return result

    def get_available_filters(self) -> List[str]:
        """Get list of available filter names."""
        return [kind.value for kind in self.filters]


_default_engine = FilterEngine()


def apply_filter(buffer: PixelBuffer, kind: Union[FilterKind, str]) -> PixelBuffer:
    """Apply a filter with the default brightness delta."""
    return _default_engine.apply(buffer, kind)


def available_filters() -> List[str]:
    """Names of all filters, in FilterKind order."""
    return _default_engine.get_available_filters()
