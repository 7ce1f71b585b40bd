"""
Tests for NoiseMask (frame lookup, derived variants, invariants).
"""

import numpy as np
import pytest
from PIL import Image

from models.color import Color
from models.mask import NoiseMask


def blank_atlas(width, height, mode="RGBa"):
    return Image.frombytes(mode, (width, height), bytes(width * height * 4))


class TestNoiseMaskInvariants:

    def test_accepts_matching_atlas(self):
        mask = NoiseMask(blank_atlas(1000, 600), frames_count=60, frame_duration=33, canvas_size=100)
        assert mask.frames_count == 60
        assert mask.loop_duration == 1980

    def test_rejects_wrong_atlas_size(self):
        with pytest.raises(ValueError):
            NoiseMask(blank_atlas(1000, 500), frames_count=60, frame_duration=33, canvas_size=100)

    def test_rejects_straight_alpha_image(self):
        with pytest.raises(ValueError):
            NoiseMask(blank_atlas(40, 10, mode="RGBA"), frames_count=4, frame_duration=33, canvas_size=10)

    @pytest.mark.parametrize("frames,duration,canvas", [(0, 33, 10), (4, 0, 10), (4, 33, 0)])
    def test_rejects_non_positive_fields(self, frames, duration, canvas):
        with pytest.raises(ValueError):
            NoiseMask(blank_atlas(40, 10), frames_count=frames, frame_duration=duration, canvas_size=canvas)

    def test_from_pixels_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            NoiseMask.from_pixels(np.zeros((10, 40, 3), dtype=np.uint8), 4, 33, 10)


class TestFrameLookup:

    def test_first_row(self, small_mask):
        frame = small_mask.frame_at(1)
        assert frame.index == 1
        assert frame.source == (24, 0, 24, 24)
        assert frame.image is small_mask.image

    def test_second_row(self, small_mask):
        assert small_mask.frame_at(11).source == (24, 24, 24, 24)

    def test_index_wraps(self, small_mask):
        assert small_mask.frame_at(13).index == 1
        assert small_mask.frame_at(-1).index == 11

    def test_current_frame_follows_clock(self, small_mask):
        assert small_mask.current_frame(time_ms=0).index == 0
        assert small_mask.current_frame(time_ms=5 * 20 + 3).index == 5
        assert small_mask.current_frame(time_ms=240).index == 0
        assert small_mask.current_frame(time_ms=240 + 11 * 20).index == 11

    def test_current_frame_uses_shared_clock(self, small_mask):
        frame = small_mask.current_frame()
        assert 0 <= frame.index < small_mask.frames_count

    def test_crop_returns_one_cell(self, small_mask):
        frame = small_mask.frame_at(3)
        cell = frame.crop()
        assert cell.size == (24, 24)
        assert frame.box == (72, 0, 96, 24)


class TestDerivedVariants:

    def test_colorize_tints_every_frame(self, small_mask):
        source = small_mask.pixels()
        red = small_mask.colorize(Color.from_rgb(255, 0, 0))
        pixels = red.pixels()

        assert red is not small_mask
        assert red.image.size == small_mask.image.size
        assert (red.frames_count, red.frame_duration, red.canvas_size) == (12, 20, 24)
        np.testing.assert_array_equal(pixels[..., 3], source[..., 3])
        np.testing.assert_array_equal(pixels[..., 0], source[..., 3])
        assert not pixels[..., 1].any()
        assert not pixels[..., 2].any()

    def test_colorize_applies_color_alpha(self, small_mask):
        source_alpha = small_mask.pixels()[..., 3].astype(np.uint32)
        tinted = small_mask.colorize(Color.from_rgb(255, 255, 255, alpha=128))

        expected = (source_alpha * 128 + 127) // 255
        np.testing.assert_array_equal(tinted.pixels()[..., 3], expected)

    def test_colorize_leaves_source_untouched(self, small_mask):
        before = small_mask.pixels()
        small_mask.colorize(Color.from_hex("#3a7bd5"))
        np.testing.assert_array_equal(small_mask.pixels(), before)

    def test_darken_composites_over_black(self, small_mask):
        source = small_mask.pixels()
        dark = small_mask.darken(32)
        pixels = dark.pixels()

        empty = source[..., 3] == 0
        full = source[..., 3] == 255
        assert empty.any()
        assert (pixels[..., 3][empty] == 32).all()
        assert (pixels[..., 3][full] == 255).all()
        np.testing.assert_array_equal(pixels[..., :3], source[..., :3])
        assert (dark.frames_count, dark.frame_duration, dark.canvas_size) == (12, 20, 24)

    def test_darken_rejects_bad_alpha(self, small_mask):
        with pytest.raises(ValueError):
            small_mask.darken(300)

    def test_to_image_is_straight_alpha(self, small_mask):
        image = small_mask.to_image()
        assert image.mode == "RGBA"
        assert image.size == (240, 48)
