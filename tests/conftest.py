import numpy as np
import pytest

from models.descriptor import GenerationDescriptor
from engine.atlas_renderer import generate_noise_mask


@pytest.fixture
def tiny_descriptor():
    """Smallest useful descriptor: 4 frames of 10px, one particle."""
    return GenerationDescriptor(
        frames_count=4,
        frame_duration=33,
        canvas_size=10,
        particles_count=1,
        particle_sprites_count=1,
        particle_size_min=2,
        particle_size_max=2,
        particle_fade_in_duration=1,
        particle_shown_duration=1,
        particle_fade_out_duration=1,
    )


@pytest.fixture
def small_descriptor():
    """12 frames (two atlas rows) of 24px, 60 particles, 5 sprite variants."""
    return GenerationDescriptor(
        frames_count=12,
        frame_duration=20,
        canvas_size=24,
        particles_count=60,
        particle_sprites_count=5,
        particle_size_min=1.5,
        particle_size_max=3.0,
        particle_fade_in_duration=40,
        particle_shown_duration=20,
        particle_fade_out_duration=40,
    )


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def small_mask(small_descriptor, rng):
    return generate_noise_mask(small_descriptor, rng)
