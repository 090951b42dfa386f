"""
Pytest configuration and fixtures for Print Preview tests
"""

from unittest.mock import MagicMock

import cv2
import numpy as np
import pytest

from common.enums import FilterKind
from core.pipeline import ImagePipeline
from core.session_manager import ImageSessionManager
from domain_types import EncodedImage, PixelBuffer, RawUpload
from services.image_service import ImageService


def encode_rgba(rgba: np.ndarray, ext: str = ".png") -> bytes:
    """Encode an RGBA array with OpenCV (which expects BGR/BGRA)."""
    if ext == ".png":
        image = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)
    else:
        image = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR)
    success, buffer = cv2.imencode(ext, image)
    assert success
    return buffer.tobytes()


def build_upload(
    width: int, height: int, rgba=(255, 255, 255, 255), ext: str = ".png"
) -> RawUpload:
    """Create an encoded solid-color upload."""
    rgba_array = np.empty((height, width, 4), dtype=np.uint8)
    rgba_array[:] = rgba
    media_type = "image/png" if ext == ".png" else "image/jpeg"
    return RawUpload(data=encode_rgba(rgba_array, ext), media_type=media_type, filename=f"t{ext}")


@pytest.fixture
def encode_image():
    """Encoder for RGBA arrays, returns container bytes"""
    return encode_rgba


@pytest.fixture
def make_upload():
    """Factory for encoded solid-color uploads"""
    return build_upload


@pytest.fixture
def test_image():
    """Create a 640x480 RGBA test image with some content"""
    image = np.zeros((480, 640, 4), dtype=np.uint8)
    image[:, :, 3] = 255
    # Add some content
    image[100:300, 100:300, :3] = (255, 255, 255)
    image[300:400, 400:500, :3] = (200, 40, 10)
    return image


@pytest.fixture
def test_buffer(test_image):
    """Test image wrapped in a PixelBuffer"""
    return PixelBuffer(test_image)


@pytest.fixture
def png_upload(test_image):
    """Test image encoded as a PNG upload"""
    return RawUpload(data=encode_rgba(test_image), media_type="image/png", filename="test.png")


@pytest.fixture
def large_upload():
    """1600x1200 opaque white JPEG upload"""
    return build_upload(1600, 1200, ext=".jpg")


@pytest.fixture
def pipeline():
    """Create ImagePipeline with default limits"""
    return ImagePipeline()


@pytest.fixture
def session_manager():
    """Create ImageSessionManager instance for testing"""
    manager = ImageSessionManager(max_sessions=10)
    yield manager
    # Cleanup
    manager.cleanup()


@pytest.fixture
def image_service(pipeline, session_manager):
    """Create ImageService instance for testing"""
    return ImageService(pipeline=pipeline, session_manager=session_manager)


@pytest.fixture
def mock_pipeline():
    """Create mock ImagePipeline for unit testing"""
    mock = MagicMock()
    resized = PixelBuffer.filled(80, 60)
    encoded = EncodedImage(data=b"\xff\xd8\xff", media_type="image/jpeg", width=80, height=60)
    mock.ingest.return_value = MagicMock(
        encoded=encoded, resized=resized, filter=FilterKind.NORMAL, original_size=(160, 120)
    )
    mock.reapply_filter.return_value = encoded
    mock.filter_engine.get_available_filters.return_value = ["normal", "sepia"]
    return mock
