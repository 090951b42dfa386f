"""
Central types module for the print preview pipeline.

This module holds the values that flow between pipeline stages:
- RawUpload: bytes as received from the caller, plus declared media type
- PixelBuffer: decoded RGBA8 raster, the canonical working representation
- EncodedImage: compressed output payload

It has no dependencies on other project modules (only stdlib, NumPy and Pydantic).

IMPORTANT: This module must NOT import from schemas, core, services or api
to avoid circular dependencies.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

CHANNELS = 4


class RawUpload(BaseModel):
    """Opaque uploaded bytes with the media type declared by the caller."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., repr=False)
    media_type: str = Field(..., description="Declared media type, e.g. image/png")
    size: int = Field(..., ge=0, description="Byte length of the payload")
    filename: Optional[str] = Field(default=None, description="Original file name, if known")

    @model_validator(mode="before")
    @classmethod
    def fill_size(cls, values: Any) -> Any:
        """Default size to the payload length when not declared."""
        if isinstance(values, dict) and values.get("size") is None:
            values = dict(values)
            values["size"] = len(values.get("data") or b"")
        return values


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    Decoded raster in RGBA8, row-major.

    Wraps a NumPy array of shape (height, width, 4) and dtype uint8. The array
    held by the buffer is a read-only view: stages produce new buffers instead
    of mutating the one they were handed.
    """

    pixels: np.ndarray

    def __post_init__(self):
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray):
            raise ValueError(f"PixelBuffer requires a numpy array, got {type(pixels).__name__}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"PixelBuffer requires uint8 samples, got {pixels.dtype}")
        if pixels.ndim != 3 or pixels.shape[2] != CHANNELS:
            raise ValueError(f"PixelBuffer requires shape (height, width, 4), got {pixels.shape}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError(f"PixelBuffer dimensions must be positive, got {pixels.shape[:2]}")

        view = np.ascontiguousarray(pixels).view()
        view.flags.writeable = False
        object.__setattr__(self, "pixels", view)

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> "PixelBuffer":
        """Build a buffer from packed RGBA bytes."""
        expected = width * height * CHANNELS
        if width <= 0 or height <= 0 or len(data) != expected:
            raise ValueError(
                f"Expected {expected} bytes for {width}x{height} RGBA, got {len(data)}"
            )
        array = np.frombuffer(data, dtype=np.uint8).reshape((height, width, CHANNELS))
        return cls(array.copy())

    @classmethod
    def filled(
        cls, width: int, height: int, rgba: Tuple[int, int, int, int] = (255, 255, 255, 255)
    ) -> "PixelBuffer":
        """Build a buffer where every pixel has the same RGBA value."""
        array = np.empty((height, width, CHANNELS), dtype=np.uint8)
        array[:] = rgba
        return cls(array)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def nbytes(self) -> int:
        return int(self.pixels.nbytes)

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) tuple."""
        return self.width, self.height

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        """RGBA value at column x, row y."""
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def to_bytes(self) -> bytes:
        """Packed RGBA bytes, length width*height*4."""
        return self.pixels.tobytes()

    def copy_pixels(self) -> np.ndarray:
        """Writable copy of the underlying samples."""
        return self.pixels.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and np.array_equal(
            self.pixels, other.pixels
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


class EncodedImage(BaseModel):
    """Compressed image payload returned to callers."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., repr=False)
    media_type: str = Field(..., description="Media type of the payload")
    width: int = Field(..., gt=0, description="Encoded raster width")
    height: int = Field(..., gt=0, description="Encoded raster height")

    @property
    def size(self) -> int:
        """Payload length in bytes."""
        return len(self.data)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("utf-8")

    def to_data_url(self) -> str:
        """Payload as a data URL, ready for direct assignment to an <img> src."""
        return f"data:{self.media_type};base64,{self.to_base64()}"
