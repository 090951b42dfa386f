"""
Tests for core.image.processors module.

Tests target size computation and downscaling of pixel buffers.
"""

import pytest

from core.image.processors import compute_target_size, resize, round_half_up
from domain_types import PixelBuffer


class TestComputeTargetSize:
    """Tests for compute_target_size function."""

    def test_landscape_downscaled(self):
        """Test that 1600x1200 fits into 800x600."""
        assert compute_target_size(1600, 1200, 800, 800) == (800, 600)

    def test_portrait_downscaled(self):
        assert compute_target_size(1200, 1600, 800, 800) == (600, 800)

    def test_square_downscaled(self):
        """Test that width wins the tie for square images."""
        assert compute_target_size(1000, 1000, 800, 800) == (800, 800)

    @pytest.mark.parametrize("size", [(500, 300), (800, 800), (1, 1), (300, 800)])
    def test_small_images_unchanged(self, size):
        """Test that images within the limits are never upscaled."""
        assert compute_target_size(size[0], size[1], 800, 800) == size

    def test_extreme_aspect_ratio_keeps_one_pixel(self):
        """Test that the short side never collapses to zero."""
        assert compute_target_size(8000, 1, 800, 800) == (800, 1)
        assert compute_target_size(1, 8000, 800, 800) == (1, 800)

    def test_rounds_half_up(self):
        """Test that a derived side of x.5 rounds up."""
        assert compute_target_size(1600, 1001, 800, 800) == (800, 501)

    def test_non_square_limits(self):
        """Test that the derived side is clamped to its own maximum."""
        width, height = compute_target_size(1000, 900, 800, 400)

        assert (width, height) == (444, 400)
        assert width <= 800 and height <= 400

    def test_aspect_ratio_preserved(self):
        width, height = compute_target_size(3000, 2000, 800, 800)

        assert width == 800
        assert abs(width / height - 1.5) < 0.01

    @pytest.mark.parametrize(
        "args",
        [(0, 100, 800, 800), (100, -1, 800, 800), (100, 100, 0, 800), (100, 100, 800, -5)],
    )
    def test_invalid_dimensions(self, args):
        with pytest.raises(ValueError):
            compute_target_size(*args)


class TestRoundHalfUp:
    """Tests for round_half_up helper."""

    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2


class TestResize:
    """Tests for resize function."""

    def test_resize_downscales(self, test_buffer):
        resized = resize(test_buffer, 320, 320)

        assert resized.size == (320, 240)

    def test_resize_default_limit(self):
        buffer = PixelBuffer.filled(1600, 1200, (10, 20, 30, 255))

        resized = resize(buffer)

        assert resized.size == (800, 600)
        assert resized.pixel(400, 300) == (10, 20, 30, 255)

    def test_resize_fitting_buffer_returns_same_object(self, test_buffer):
        """Test that a buffer that already fits is returned as-is."""
        assert resize(test_buffer) is test_buffer

    def test_resize_keeps_alpha(self):
        buffer = PixelBuffer.filled(1000, 500, (255, 0, 0, 128))

        resized = resize(buffer)

        assert resized.size == (800, 400)
        assert resized.pixel(0, 0)[3] == 128

    def test_resize_does_not_modify_input(self, test_buffer):
        before = test_buffer.copy_pixels()

        resize(test_buffer, 100, 100)

        assert (test_buffer.pixels == before).all()
