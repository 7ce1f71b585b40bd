"""Generation descriptor and cache validator models"""

from dataclasses import dataclass
from typing import Any, Dict

# Frames are laid out row-major, at most this many per atlas row
FRAMES_PER_ROW = 10


def atlas_columns(frames_count: int) -> int:
    return min(frames_count, FRAMES_PER_ROW)


def atlas_rows(frames_count: int) -> int:
    return (frames_count + FRAMES_PER_ROW - 1) // FRAMES_PER_ROW


def atlas_size(frames_count: int, canvas_size: int) -> tuple:
    """(width, height) of the atlas holding `frames_count` square frames"""
    return (atlas_columns(frames_count) * canvas_size, atlas_rows(frames_count) * canvas_size)


@dataclass(frozen=True)
class GenerationDescriptor:
    """
    Immutable parameter set controlling procedural mask generation.

    Durations are integer milliseconds, sizes are pixels. A malformed
    descriptor is a caller bug and raises ValueError on construction.

    Example:
        descriptor = GenerationDescriptor(
            frames_count=60,
            frame_duration=33,
            canvas_size=100,
            particles_count=2000,
            particle_sprites_count=5,
            particle_size_min=1.5,
            particle_size_max=2.0,
            particle_fade_in_duration=200,
            particle_shown_duration=0,
            particle_fade_out_duration=200,
        )
    """

    frames_count: int
    frame_duration: int
    canvas_size: int
    particles_count: int
    particle_sprites_count: int
    particle_size_min: float
    particle_size_max: float
    particle_fade_in_duration: int
    particle_shown_duration: int
    particle_fade_out_duration: int

    def __post_init__(self):
        if self.frames_count <= 0:
            raise ValueError(f"frames_count must be positive, got {self.frames_count}")
        if self.frame_duration <= 0:
            raise ValueError(f"frame_duration must be positive, got {self.frame_duration}")
        if self.canvas_size <= 0:
            raise ValueError(f"canvas_size must be positive, got {self.canvas_size}")
        if self.particles_count <= 0:
            raise ValueError(f"particles_count must be positive, got {self.particles_count}")
        if self.particle_sprites_count <= 0:
            raise ValueError(f"particle_sprites_count must be positive, got {self.particle_sprites_count}")
        if self.particle_size_min <= 0:
            raise ValueError(f"particle_size_min must be positive, got {self.particle_size_min}")
        if self.particle_size_max < self.particle_size_min:
            raise ValueError(
                f"particle_size_max ({self.particle_size_max}) is below "
                f"particle_size_min ({self.particle_size_min})"
            )
        durations = (
            self.particle_fade_in_duration,
            self.particle_shown_duration,
            self.particle_fade_out_duration,
        )
        if any(d < 0 for d in durations):
            raise ValueError(f"Particle durations must not be negative, got {durations}")
        if self.loop_duration <= self.particle_lifetime:
            raise ValueError(
                f"Loop duration {self.loop_duration} must exceed "
                f"particle lifetime {self.particle_lifetime}"
            )

    @property
    def loop_duration(self) -> int:
        """Total animation duration, frames_count * frame_duration"""
        return self.frames_count * self.frame_duration

    @property
    def particle_lifetime(self) -> int:
        """fade in + shown + fade out"""
        return (
            self.particle_fade_in_duration
            + self.particle_shown_duration
            + self.particle_fade_out_duration
        )

    @property
    def columns(self) -> int:
        return atlas_columns(self.frames_count)

    @property
    def rows(self) -> int:
        return atlas_rows(self.frames_count)

    def validator(self) -> 'MaskValidator':
        """Header fields a cached mask generated from this descriptor must match"""
        return MaskValidator(
            frame_duration=self.frame_duration,
            frames_count=self.frames_count,
            canvas_size=self.canvas_size,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GenerationDescriptor':
        """
        Build from a config mapping (keys match field names)

        Raises:
            KeyError: missing field
            ValueError: invalid field value
        """
        return cls(
            frames_count=int(data["frames_count"]),
            frame_duration=int(data["frame_duration"]),
            canvas_size=int(data["canvas_size"]),
            particles_count=int(data["particles_count"]),
            particle_sprites_count=int(data["particle_sprites_count"]),
            particle_size_min=float(data["particle_size_min"]),
            particle_size_max=float(data["particle_size_max"]),
            particle_fade_in_duration=int(data["particle_fade_in_duration"]),
            particle_shown_duration=int(data["particle_shown_duration"]),
            particle_fade_out_duration=int(data["particle_fade_out_duration"]),
        )


@dataclass(frozen=True)
class MaskValidator:
    """Subset of serialized header fields a cache read must match"""
    frame_duration: int
    frames_count: int
    canvas_size: int
