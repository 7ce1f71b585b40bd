"""
AtlasRenderer - paints every animation frame of a noise mask into one atlas.

Frame f shows the loop at time t = f * frame_duration. Each particle is
evaluated at `t - start` and `t + loop - start`, so a particle whose lifetime
crosses the loop boundary also shows up at the beginning of the loop.

Frames are tileable squares: a sprite crossing the right or bottom edge is
painted again shifted by -canvas_size on that axis (both axes at the corner).

Sprites are white and premultiplied, so every channel of the atlas equals its
alpha. Painting therefore runs on a single float coverage plane per frame
and is expanded to RGBa once at the end.
"""

from __future__ import annotations
import time
from typing import List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from models.descriptor import GenerationDescriptor
from models.mask import NoiseMask
from models.particle import Particle
from engine.generator import (
    DRAWS_PER_PARTICLE,
    generate_particles,
    generate_sprites,
    sprite_size_for,
)
from engine.random_source import BufferedRandom
from models.enums import LogCategory
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.RENDER)


def particle_opacity(descriptor: GenerationDescriptor, local: int) -> Optional[float]:
    """
    Opacity of a particle `local` ms after its start, None when not visible

    Linear fade in, full while shown, linear fade out.
    """
    lifetime = descriptor.particle_lifetime
    if local <= 0 or local >= lifetime:
        return None
    fade_in = descriptor.particle_fade_in_duration
    fade_out = descriptor.particle_fade_out_duration
    if local < fade_in:
        return local / fade_in
    if local > lifetime - fade_out:
        return (lifetime - local) / fade_out
    return 1.0


def tile_positions(x: int, y: int, sprite_size: int, canvas_size: int) -> List[Tuple[int, int]]:
    """Paint positions of one sprite, including wrap-around copies"""
    positions = [(x, y)]
    crosses_right = x + sprite_size > canvas_size
    crosses_bottom = y + sprite_size > canvas_size
    if crosses_right:
        positions.append((x - canvas_size, y))
        if crosses_bottom:
            positions.append((x, y - canvas_size))
            positions.append((x - canvas_size, y - canvas_size))
    elif crosses_bottom:
        positions.append((x, y - canvas_size))
    return positions


def paint_sprite(canvas: np.ndarray, sprite: np.ndarray, x: int, y: int, opacity: float) -> None:
    """
    SourceOver of `sprite` (coverage, 0..1) at (x, y) with opacity, clipped to canvas
    """
    height, width = canvas.shape
    sprite_h, sprite_w = sprite.shape

    left, top = max(x, 0), max(y, 0)
    right, bottom = min(x + sprite_w, width), min(y + sprite_h, height)
    if left >= right or top >= bottom:
        return

    source = sprite[top - y:bottom - y, left - x:right - x] * opacity
    target = canvas[top:bottom, left:right]
    target *= 1.0 - source
    target += source


class AtlasRenderer:
    """
    Renders the frame atlas for one descriptor.

    Example:
        renderer = AtlasRenderer(descriptor)
        image = renderer.render(particles, sprites)
    """

    def __init__(self, descriptor: GenerationDescriptor):
        self.descriptor = descriptor
        self.sprite_size = sprite_size_for(descriptor)

    def paints_for(self, particle: Particle, time_ms: int) -> List[Tuple[int, int, float]]:
        """
        (x, y, opacity) paint operations of one particle in the frame at `time_ms`
        """
        descriptor = self.descriptor
        paints = []
        for local in (time_ms - particle.start, time_ms + descriptor.loop_duration - particle.start):
            opacity = particle_opacity(descriptor, local)
            if opacity is None:
                continue
            for x, y in tile_positions(particle.x, particle.y, self.sprite_size, descriptor.canvas_size):
                paints.append((x, y, opacity))
        return paints

    def render_frame(self, particles: Sequence[Particle], sprites: Sequence[np.ndarray], index: int) -> np.ndarray:
        """Coverage plane (canvas_size x canvas_size, float32) of frame `index`"""
        size = self.descriptor.canvas_size
        canvas = np.zeros((size, size), dtype=np.float32)
        time_ms = index * self.descriptor.frame_duration
        for particle in particles:
            sprite = sprites[particle.sprite_index]
            for x, y, opacity in self.paints_for(particle, time_ms):
                paint_sprite(canvas, sprite, x, y, opacity)
        return canvas

    def render(self, particles: Sequence[Particle], sprites: Sequence[Image.Image]) -> Image.Image:
        """Full atlas as a premultiplied RGBa image"""
        descriptor = self.descriptor
        size = descriptor.canvas_size
        columns, rows = descriptor.columns, descriptor.rows

        coverage_sprites = [
            np.asarray(sprite.getchannel(3), dtype=np.float32) / 255.0
            for sprite in sprites
        ]

        plane = np.zeros((rows * size, columns * size), dtype=np.float32)
        for index in range(descriptor.frames_count):
            row, column = divmod(index, columns)
            plane[row * size:(row + 1) * size, column * size:(column + 1) * size] = (
                self.render_frame(particles, coverage_sprites, index)
            )

        channel = np.clip(np.rint(plane * 255.0), 0, 255).astype(np.uint8)
        pixels = np.repeat(channel[:, :, np.newaxis], 4, axis=2)
        return Image.frombytes("RGBa", (columns * size, rows * size), np.ascontiguousarray(pixels).tobytes())


def generate_noise_mask(
    descriptor: GenerationDescriptor,
    rng: Optional[np.random.Generator] = None,
) -> NoiseMask:
    """
    Full pipeline: particles + sprites -> atlas -> NoiseMask

    Args:
        descriptor: Generation parameters
        rng: Source of randomness (OS-seeded when None)
    """
    started = time.perf_counter()

    random = BufferedRandom(descriptor.particles_count * DRAWS_PER_PARTICLE, rng)
    particles = generate_particles(descriptor, random)
    sprites = generate_sprites(descriptor)
    image = AtlasRenderer(descriptor).render(particles, sprites)

    mask = NoiseMask(image, descriptor.frames_count, descriptor.frame_duration, descriptor.canvas_size)
    log.info(
        "Generated noise mask",
        frames=descriptor.frames_count,
        particles=descriptor.particles_count,
        atlas=f"{image.size[0]}x{image.size[1]}",
        elapsed_ms=f"{(time.perf_counter() - started) * 1000:.0f}",
    )
    return mask
