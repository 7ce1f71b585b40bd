"""
Mask frame - region of the atlas holding one animation frame.

Consumers draw `frame.image` clipped to `frame.source`; nothing is copied
until crop() is called.
"""

from dataclasses import dataclass
from typing import Tuple

from PIL import Image


@dataclass(frozen=True)
class MaskFrame:
    """
    Attributes:
        image: The whole atlas (premultiplied RGBa), shared, never mutated
        index: Frame index inside the animation
        source: (x, y, width, height) of the frame cell in the atlas
    """
    image: Image.Image
    index: int
    source: Tuple[int, int, int, int]

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """Source rectangle as a PIL (left, upper, right, lower) box"""
        x, y, w, h = self.source
        return (x, y, x + w, y + h)

    def crop(self) -> Image.Image:
        """Copy of this frame's pixels"""
        return self.image.crop(self.box)
