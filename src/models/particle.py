"""Particle placement model"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Particle:
    """
    One particle of the noise mask.

    Attributes:
        start: Phase offset within the loop (ms)
        sprite_index: Which sprite variant is painted
        x, y: Top-left paint position inside the canvas
    """
    start: int
    sprite_index: int
    x: int
    y: int
