"""
Particle and sprite generation

Pure functions from a GenerationDescriptor (+ random source) to particle
placements and rounded-rectangle sprite variants.
"""

import math
from typing import List

from PIL import Image, ImageDraw

from models.descriptor import GenerationDescriptor
from models.particle import Particle
from engine.random_source import BufferedRandom
from models.enums import LogCategory
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.GENERATOR)

# Offset of the rounded rectangle inside the sprite; the same amount is kept
# free on the far side for the anti-aliased edge.
SPRITE_PADDING = 1

# Sprites are rasterized this many times larger and box-filtered down
SUPERSAMPLE = 4

DRAWS_PER_PARTICLE = 3


def sprite_size_for(descriptor: GenerationDescriptor) -> int:
    """Side of the square sprite canvas"""
    return 2 * SPRITE_PADDING + int(math.ceil(descriptor.particle_size_max))


def sprite_dimensions(descriptor: GenerationDescriptor, index: int) -> tuple:
    """
    (width, height) of sprite variant `index`

    Variants below the middle are wider, variants above it are taller,
    the middle one is a min x min square.
    """
    count = descriptor.particle_sprites_count
    if not 0 <= index < count:
        raise ValueError(f"Sprite index {index} out of range 0..{count - 1}")

    middle = count // 2
    size_min = descriptor.particle_size_min
    delta = descriptor.particle_size_max - size_min

    width = size_min + delta * (middle - index) / middle if index < middle else size_min
    height = size_min + delta * (index - middle) / (count - 1 - middle) if index > middle else size_min
    return (width, height)


def generate_particle(descriptor: GenerationDescriptor, index: int, random: BufferedRandom) -> Particle:
    """Particle `index`, phases spaced evenly over the loop"""
    return Particle(
        start=index * descriptor.frames_count * descriptor.frame_duration // descriptor.particles_count,
        sprite_index=random.index(descriptor.particle_sprites_count),
        x=random.index(descriptor.canvas_size),
        y=random.index(descriptor.canvas_size),
    )


def generate_particles(descriptor: GenerationDescriptor, random: BufferedRandom) -> List[Particle]:
    particles = [generate_particle(descriptor, i, random) for i in range(descriptor.particles_count)]
    log.debug(
        "Placed particles",
        count=len(particles),
        spacing_ms=descriptor.loop_duration / descriptor.particles_count,
    )
    return particles


def generate_sprite(descriptor: GenerationDescriptor, index: int, size: int) -> Image.Image:
    """
    White rounded rectangle on transparent background, premultiplied RGBa
    """
    width, height = sprite_dimensions(descriptor, index)
    radius = descriptor.particle_size_min / 2

    scale = SUPERSAMPLE
    coverage = Image.new("L", (size * scale, size * scale), 0)
    draw = ImageDraw.Draw(coverage)
    left = SPRITE_PADDING * scale
    top = SPRITE_PADDING * scale
    right = left + max(int(round(width * scale)) - 1, 0)
    bottom = top + max(int(round(height * scale)) - 1, 0)
    draw.rounded_rectangle(
        (left, top, right, bottom),
        radius=int(round(radius * scale)),
        fill=255,
    )
    coverage = coverage.resize((size, size), Image.Resampling.BOX)

    # White premultiplied: every channel equals coverage
    return Image.merge("RGBa", (coverage, coverage, coverage, coverage))


def generate_sprites(descriptor: GenerationDescriptor) -> List[Image.Image]:
    size = sprite_size_for(descriptor)
    sprites = [generate_sprite(descriptor, i, size) for i in range(descriptor.particle_sprites_count)]
    log.debug("Rasterized sprite variants", count=len(sprites), size=f"{size}x{size}")
    return sprites
