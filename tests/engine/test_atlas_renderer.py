"""
Tests for AtlasRenderer: particle timing, toroidal tiling and atlas layout.
"""

from dataclasses import replace

import numpy as np
import pytest

from engine.atlas_renderer import (
    AtlasRenderer,
    generate_noise_mask,
    paint_sprite,
    particle_opacity,
    tile_positions,
)
from models.particle import Particle


class TestParticleOpacity:
    """fade in 40, shown 20, fade out 40 -> lifetime 100"""

    @pytest.mark.parametrize("local,expected", [
        (-5, None),
        (0, None),
        (20, 0.5),
        (40, 1.0),
        (50, 1.0),
        (80, 0.5),
        (100, None),
        (150, None),
    ])
    def test_ramp(self, small_descriptor, local, expected):
        assert particle_opacity(small_descriptor, local) == expected

    def test_zero_fade_durations(self, small_descriptor):
        descriptor = replace(small_descriptor, particle_fade_in_duration=0, particle_fade_out_duration=0)
        assert particle_opacity(descriptor, 1) == 1.0
        assert particle_opacity(descriptor, 19) == 1.0


class TestTilePositions:

    def test_inside_canvas_paints_once(self):
        assert tile_positions(3, 3, 5, 24) == [(3, 3)]

    def test_touching_edge_does_not_wrap(self):
        assert tile_positions(19, 19, 5, 24) == [(19, 19)]

    def test_crossing_right_edge(self):
        assert tile_positions(22, 5, 5, 24) == [(22, 5), (-2, 5)]

    def test_crossing_bottom_edge(self):
        assert tile_positions(5, 22, 5, 24) == [(5, 22), (5, -2)]

    def test_crossing_corner(self):
        assert tile_positions(22, 22, 5, 24) == [(22, 22), (-2, 22), (22, -2), (-2, -2)]


class TestPaintSprite:

    def test_clipped_to_canvas(self):
        canvas = np.zeros((4, 4), dtype=np.float32)
        paint_sprite(canvas, np.ones((2, 2), dtype=np.float32), -1, -1, 1.0)

        assert canvas[0, 0] == 1.0
        assert canvas.sum() == 1.0

    def test_entirely_outside_is_ignored(self):
        canvas = np.zeros((4, 4), dtype=np.float32)
        paint_sprite(canvas, np.ones((2, 2), dtype=np.float32), 10, 0, 1.0)
        assert not canvas.any()

    def test_source_over_accumulates(self):
        canvas = np.zeros((4, 4), dtype=np.float32)
        sprite = np.ones((2, 2), dtype=np.float32)
        paint_sprite(canvas, sprite, 1, 1, 0.5)
        paint_sprite(canvas, sprite, 1, 1, 0.5)

        assert canvas[1, 1] == pytest.approx(0.75)
        assert canvas[0, 0] == 0.0


class TestPaintsForParticle:

    def test_particle_past_right_edge_paints_twice(self, small_descriptor):
        renderer = AtlasRenderer(small_descriptor)
        particle = Particle(start=0, sprite_index=0, x=22, y=3)

        assert renderer.paints_for(particle, 20) == [(22, 3, 0.5), (-2, 3, 0.5)]

    def test_corner_particle_paints_four_times(self, small_descriptor):
        renderer = AtlasRenderer(small_descriptor)
        particle = Particle(start=0, sprite_index=0, x=23, y=20)

        paints = renderer.paints_for(particle, 50)
        assert [(x, y) for x, y, _ in paints] == [(23, 20), (-1, 20), (23, -4), (-1, -4)]

    def test_invisible_outside_lifetime(self, small_descriptor):
        renderer = AtlasRenderer(small_descriptor)
        particle = Particle(start=0, sprite_index=0, x=3, y=3)

        assert renderer.paints_for(particle, 0) == []
        assert renderer.paints_for(particle, 120) == []

    def test_lifetime_wraps_past_loop_end(self, small_descriptor):
        renderer = AtlasRenderer(small_descriptor)
        particle = Particle(start=200, sprite_index=0, x=3, y=3)

        # 20ms into the loop the particle is 60ms old (started 200ms into the previous loop)
        assert renderer.paints_for(particle, 20) == [(3, 3, 1.0)]


class TestRenderFrame:

    def test_corner_particle_tiles_seamlessly(self, small_descriptor):
        renderer = AtlasRenderer(small_descriptor)
        particle = Particle(start=0, sprite_index=0, x=22, y=22)
        sprite = np.ones((5, 5), dtype=np.float32)

        frame = renderer.render_frame([particle], [sprite], index=1)

        for y, x in [(23, 23), (0, 0), (0, 23), (23, 0), (2, 2)]:
            assert frame[y, x] == pytest.approx(0.5)
        assert frame[10, 10] == 0.0
        assert frame[3, 3] == 0.0


class TestGenerateNoiseMask:

    def test_tiny_descriptor_end_to_end(self, tiny_descriptor, rng):
        mask = generate_noise_mask(tiny_descriptor, rng)

        assert mask.image.size == (40, 10)
        assert mask.frames_count == 4
        assert mask.frame_duration == 33
        assert mask.canvas_size == 10

    def test_default_layout_is_ten_by_six(self, rng):
        from models.descriptor import GenerationDescriptor

        descriptor = GenerationDescriptor(
            frames_count=60,
            frame_duration=33,
            canvas_size=100,
            particles_count=20,
            particle_sprites_count=5,
            particle_size_min=1.5,
            particle_size_max=2.0,
            particle_fade_in_duration=200,
            particle_shown_duration=0,
            particle_fade_out_duration=200,
        )
        mask = generate_noise_mask(descriptor, rng)

        assert mask.image.size == (1000, 600)

    def test_mask_is_grayscale_premultiplied(self, small_mask):
        pixels = small_mask.pixels()

        assert pixels[..., 3].max() > 0
        for channel in range(3):
            np.testing.assert_array_equal(pixels[..., channel], pixels[..., 3])

    def test_same_seed_same_atlas(self, small_descriptor):
        a = generate_noise_mask(small_descriptor, np.random.default_rng(7))
        b = generate_noise_mask(small_descriptor, np.random.default_rng(7))

        np.testing.assert_array_equal(a.pixels(), b.pixels())
