"""
Tests for core.image.filters module.

Tests the per-pixel color filters and the filter engine.
"""

import numpy as np
import pytest

from common.enums import FilterKind
from core.image.filters import (
    BrightFilter,
    FilterEngine,
    GrayscaleFilter,
    SepiaFilter,
    apply_filter,
    available_filters,
)
from domain_types import PixelBuffer


def single_pixel(rgba):
    return PixelBuffer.filled(1, 1, rgba)


class TestFilters:
    """Tests for individual filters."""

    def test_normal_is_identity(self, test_buffer):
        result = apply_filter(test_buffer, FilterKind.NORMAL)

        assert result == test_buffer
        assert result is not test_buffer

    def test_grayscale_equal_channels(self, test_buffer):
        """Test that grayscale output has R == G == B everywhere."""
        result = apply_filter(test_buffer, FilterKind.GRAYSCALE)
        pixels = result.pixels

        assert np.array_equal(pixels[:, :, 0], pixels[:, :, 1])
        assert np.array_equal(pixels[:, :, 1], pixels[:, :, 2])

    def test_grayscale_unweighted_mean(self):
        result = apply_filter(single_pixel((200, 40, 10, 255)), FilterKind.GRAYSCALE)

        # (200 + 40 + 10) / 3 = 83.33
        assert result.pixel(0, 0) == (83, 83, 83, 255)

    def test_sepia_pure_red(self):
        """Test sepia on pure red matches the matrix first column."""
        result = apply_filter(single_pixel((255, 0, 0, 255)), FilterKind.SEPIA)

        # 255 * (0.393, 0.349, 0.272) = (100.215, 88.995, 69.36)
        assert result.pixel(0, 0) == (100, 89, 69, 255)

    def test_sepia_white_clamps(self):
        result = apply_filter(single_pixel((255, 255, 255, 255)), FilterKind.SEPIA)

        r, g, b, a = result.pixel(0, 0)
        assert (r, g) == (255, 255)
        # 255 * (0.272 + 0.534 + 0.131) = 238.935
        assert b == 239
        assert a == 255

    def test_vintage(self):
        result = apply_filter(single_pixel((100, 100, 100, 255)), FilterKind.VINTAGE)

        assert result.pixel(0, 0) == (110, 90, 70, 255)

    def test_vintage_lifts_black(self):
        result = apply_filter(single_pixel((0, 0, 0, 255)), FilterKind.VINTAGE)

        assert result.pixel(0, 0) == (20, 20, 20, 255)

    def test_bright(self):
        result = apply_filter(single_pixel((10, 100, 200, 255)), FilterKind.BRIGHT)

        assert result.pixel(0, 0) == (40, 130, 230, 255)

    def test_bright_clamps_at_255(self):
        """Test that no channel overflows past 255."""
        result = apply_filter(single_pixel((240, 250, 255, 255)), FilterKind.BRIGHT)

        assert result.pixel(0, 0) == (255, 255, 255, 255)

    def test_bright_custom_delta(self):
        engine = FilterEngine(brightness_delta=5)

        result = engine.apply(single_pixel((10, 10, 10, 255)), FilterKind.BRIGHT)

        assert result.pixel(0, 0) == (15, 15, 15, 255)

    def test_negative_delta_rejected(self):
        with pytest.raises(ValueError):
            BrightFilter(delta=-1)

    @pytest.mark.parametrize("kind", list(FilterKind))
    def test_alpha_untouched(self, kind):
        """Test that every filter leaves alpha as it was."""
        buffer = PixelBuffer.filled(3, 2, (120, 60, 30, 77))

        result = apply_filter(buffer, kind)

        assert (result.pixels[:, :, 3] == 77).all()
        assert result.size == buffer.size

    @pytest.mark.parametrize("kind", list(FilterKind))
    def test_input_not_mutated(self, test_buffer, kind):
        before = test_buffer.copy_pixels()

        apply_filter(test_buffer, kind)

        assert np.array_equal(test_buffer.pixels, before)

    def test_filters_do_not_chain(self):
        """Test that each application starts from the given buffer."""
        engine = FilterEngine()
        source = single_pixel((255, 0, 0, 255))

        engine.apply(source, FilterKind.SEPIA)
        again = engine.apply(source, FilterKind.SEPIA)

        assert again.pixel(0, 0) == (100, 89, 69, 255)

    def test_strategy_classes_report_kind(self):
        assert GrayscaleFilter().kind == FilterKind.GRAYSCALE
        assert SepiaFilter().kind == FilterKind.SEPIA


class TestFilterEngine:
    """Tests for FilterEngine registry."""

    def test_apply_accepts_string(self):
        result = FilterEngine().apply(single_pixel((0, 0, 0, 255)), "bright")

        assert result.pixel(0, 0) == (30, 30, 30, 255)

    def test_unknown_filter_rejected(self):
        with pytest.raises(ValueError):
            apply_filter(single_pixel((0, 0, 0, 255)), "posterize")

    def test_every_kind_registered(self):
        engine = FilterEngine()

        assert set(engine.filters) == set(FilterKind)

    def test_available_filters(self):
        assert available_filters() == ["normal", "grayscale", "sepia", "vintage", "bright"]
