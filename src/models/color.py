"""
Color model - Tint color for mask colorization

Straight (non-premultiplied) RGB plus an alpha channel.
Uses utils.colors for hex parsing.
"""

from dataclasses import dataclass, replace
from typing import Tuple
from utils.colors import hex_to_rgba


@dataclass(frozen=True)
class Color:
    """
    Tint color representation

    Examples:
        color = Color.from_rgb(58, 123, 213)

        # From hex (theme files)
        color = Color.from_hex("#3a7bd5cc")

        r, g, b, a = color.to_rgba()
    """

    red: int
    green: int
    blue: int
    alpha: int = 255

    def __post_init__(self):
        for name in ("red", "green", "blue", "alpha"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ValueError(f"{name} out of range: {value}")

    # === CONSTRUCTORS ===

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int, alpha: int = 255) -> 'Color':
        """Create from direct RGB (0-255 each)"""
        return cls(r, g, b, alpha)

    @classmethod
    def from_hex(cls, value: str) -> 'Color':
        """
        Create from "#RRGGBB" or "#RRGGBBAA"

        Raises:
            ValueError: malformed hex string
        """
        return cls(*hex_to_rgba(value))

    # === RENDERING ===

    def to_rgb(self) -> Tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    def to_rgba(self) -> Tuple[int, int, int, int]:
        return (self.red, self.green, self.blue, self.alpha)

    def with_alpha(self, alpha: int) -> 'Color':
        """Return a copy with a different alpha"""
        return replace(self, alpha=alpha)

    def __str__(self) -> str:
        return f"Color(RGB={self.to_rgb()}, A={self.alpha})"
