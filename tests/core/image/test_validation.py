"""
Tests for core.image.validation module.

Tests media type and size checks on uploads.
"""

import pytest

from common.enums import ErrorKind, PipelineStage
from core.exceptions import NotAnImageError, TooLargeError
from core.image.validation import media_category, validate
from domain_types import RawUpload

MIB = 1024 * 1024


def declared_upload(media_type: str, size: int) -> RawUpload:
    """Upload whose declared size differs from its (empty) payload."""
    return RawUpload(data=b"", media_type=media_type, size=size)


class TestValidate:
    """Tests for validate function."""

    def test_accepts_4_mib_image(self):
        """Test that a 4 MiB image passes."""
        validate(declared_upload("image/png", 4 * MIB))

    def test_rejects_6_mib_image(self):
        """Test that a 6 MiB image is rejected as too large."""
        with pytest.raises(TooLargeError) as exc_info:
            validate(declared_upload("image/jpeg", 6 * MIB))

        assert exc_info.value.stage == PipelineStage.VALIDATE
        assert exc_info.value.kind == ErrorKind.TOO_LARGE
        assert exc_info.value.details["limit"] == 5 * MIB

    def test_exact_limit_passes(self):
        """Test that size == limit passes and size == limit + 1 fails."""
        validate(declared_upload("image/png", 5 * MIB))

        with pytest.raises(TooLargeError):
            validate(declared_upload("image/png", 5 * MIB + 1))

    @pytest.mark.parametrize("size", [0, 10, 6 * MIB])
    def test_rejects_text_plain_any_size(self, size):
        """Test that text/plain is rejected whatever its size."""
        with pytest.raises(NotAnImageError) as exc_info:
            validate(declared_upload("text/plain", size))

        assert exc_info.value.kind == ErrorKind.NOT_AN_IMAGE
        assert exc_info.value.status_code == 415

    def test_media_type_checked_before_size(self):
        """Test that an oversized non-image reports NotAnImage."""
        with pytest.raises(NotAnImageError):
            validate(declared_upload("application/pdf", 50 * MIB))

    @pytest.mark.parametrize(
        "media_type", ["image/jpeg", "image/png", "image/gif", "image/webp", "IMAGE/PNG"]
    )
    def test_accepts_image_media_types(self, media_type):
        """Test that any image/* media type passes, case-insensitively."""
        validate(declared_upload(media_type, 1024))

    def test_custom_limit(self):
        """Test validation with a caller-provided limit."""
        with pytest.raises(TooLargeError):
            validate(declared_upload("image/png", 101), max_bytes=100)

    def test_size_defaults_to_payload_length(self):
        """Test that RawUpload fills size from the payload."""
        upload = RawUpload(data=b"x" * 11, media_type="image/png")

        assert upload.size == 11
        with pytest.raises(TooLargeError):
            validate(upload, max_bytes=10)


class TestMediaCategory:
    """Tests for media_category function."""

    def test_media_category(self):
        assert media_category("image/png") == "image"
        assert media_category(" Image/svg+xml") == "image"
        assert media_category("text/plain") == "text"
        assert media_category("") == ""
