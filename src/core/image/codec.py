"""
Decoder/encoder adapter.

Turns uploaded bytes into an RGBA PixelBuffer and back into a compressed
payload using OpenCV. Everything downstream of this module only sees
PixelBuffer, never a container format.
"""

import logging
from typing import Optional

import cv2
import numpy as np

from common.constants import PipelineConstants
from core.exceptions import CorruptDataError, EncodeFailureError, UnsupportedFormatError
from domain_types import EncodedImage, PixelBuffer, RawUpload

logger = logging.getLogger(__name__)

# Magic numbers of the raster containers we know how to recognise
SIGNATURES = (
    (b"\xff\xd8\xff", "jpeg"),
    (b"\x89PNG\r\n\x1a\n", "png"),
    (b"GIF87a", "gif"),
    (b"GIF89a", "gif"),
    (b"BM", "bmp"),
    (b"II*\x00", "tiff"),
    (b"MM\x00*", "tiff"),
)


def sniff_container(data: bytes) -> Optional[str]:
    """
    Identify the image container from its leading bytes.

    Args:
        data: Raw payload

    Returns:
        Container name (jpeg, png, gif, webp, bmp, tiff) or None if unknown
    """
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "webp"
    for signature, name in SIGNATURES:
        if data.startswith(signature):
            return name
    return None


def to_rgba(image: np.ndarray) -> np.ndarray:
    """
    Normalise an OpenCV decode result to 8-bit RGBA.

    Args:
        image: Array from cv2.imdecode (grayscale, BGR or BGRA; 8 or 16 bit)

    Returns:
        Array of shape (height, width, 4), dtype uint8
    """
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        image = (np.clip(image.astype(np.float32), 0.0, 1.0) * 255.0).round().astype(np.uint8)

    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)

    channels = image.shape[2]
    if channels == 2:
        # Gray + alpha
        gray, alpha = image[:, :, 0], image[:, :, 1]
        return np.dstack([gray, gray, gray, alpha])
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)

    raise ValueError(f"Unsupported channel count: {channels}")


def decode(upload: RawUpload) -> PixelBuffer:
    """
    Decode uploaded bytes into an RGBA pixel buffer.

    Multi-frame containers yield their first frame.

    Args:
        upload: Upload that already passed validation

    Returns:
        Decoded PixelBuffer

    Raises:
        UnsupportedFormatError: If the bytes are not a recognised raster image
        CorruptDataError: If the container is recognised but cannot be fully decoded
    """
    data = upload.data
    if not data:
        raise UnsupportedFormatError("empty payload")

    container = sniff_container(data)

    try:
        image = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
    except cv2.error as e:
        logger.error(f"OpenCV failed to decode {container or 'unknown'} payload: {e}")
        if container is None:
            raise UnsupportedFormatError(f"unrecognised data ({len(data)} bytes)")
        raise CorruptDataError(container, str(e))

    if image is None or image.size == 0:
        if container is None:
            raise UnsupportedFormatError(f"unrecognised data ({len(data)} bytes)")
        logger.error(f"Recognised {container} container but pixel data is unreadable")
        raise CorruptDataError(container, "pixel data could not be decoded")

    try:
        rgba = to_rgba(image)
    except (ValueError, cv2.error) as e:
        raise CorruptDataError(container or "unknown", str(e))

    buffer = PixelBuffer(rgba)
    logger.debug(
        f"Decoded {container or 'unknown'} ({len(data)} bytes) to {buffer.width}x{buffer.height}"
    )
    return buffer


def clamp_quality(quality: float) -> float:
    """Clamp quality to [0, 1]; NaN maps to 0."""
    quality = float(quality)
    if quality != quality:
        return 0.0
    return min(1.0, max(0.0, quality))


def encode(buffer: PixelBuffer, quality: float = PipelineConstants.ENCODE_QUALITY) -> EncodedImage:
    """
    Encode a pixel buffer as JPEG.

    The alpha channel is dropped: JPEG has no transparency.

    Args:
        buffer: Buffer to encode
        quality: Compression quality on a [0, 1] scale, clamped

    Returns:
        EncodedImage with media type image/jpeg

    Raises:
        EncodeFailureError: If OpenCV reports an encoding failure
    """
    jpeg_quality = int(round(clamp_quality(quality) * 100))
    params = [cv2.IMWRITE_JPEG_QUALITY, jpeg_quality, cv2.IMWRITE_JPEG_OPTIMIZE, 1]

    try:
        bgr = cv2.cvtColor(buffer.pixels, cv2.COLOR_RGBA2BGR)
        success, encoded = cv2.imencode(PipelineConstants.OUTPUT_EXTENSION, bgr, params)
    except cv2.error as e:
        logger.error(f"Failed to encode {buffer.width}x{buffer.height} buffer: {e}")
        raise EncodeFailureError(str(e))

    if not success:
        raise EncodeFailureError(f"encoder returned no data for {buffer.width}x{buffer.height}")

    logger.debug(
        f"Encoded {buffer.width}x{buffer.height} at quality {jpeg_quality}: {encoded.size} bytes"
    )

    return EncodedImage(
        data=encoded.tobytes(),
        media_type=PipelineConstants.OUTPUT_MEDIA_TYPE,
        width=buffer.width,
        height=buffer.height,
    )
