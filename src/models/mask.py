"""
NoiseMask - finished animated noise mask (sprite atlas + animation metadata)

The atlas holds `frames_count` square frames of `canvas_size` pixels laid out
row-major, at most FRAMES_PER_ROW per row. Pixels are stored premultiplied
(PIL mode "RGBa"). A NoiseMask is never mutated; colorize() and darken()
build new instances.
"""

from __future__ import annotations
import time
from typing import Optional

import numpy as np
from PIL import Image

from models.color import Color
from models.descriptor import FRAMES_PER_ROW, atlas_size
from models.frame import MaskFrame

ATLAS_MODE = "RGBa"


def now_ms() -> int:
    """Monotonic animation clock shared by every mask consumer"""
    return int(time.monotonic() * 1000)


class NoiseMask:
    """
    Sprite atlas of a looping particle animation.

    Example:
        mask = generate_noise_mask(descriptor)
        frame = mask.current_frame()
        painter.draw(frame.image, frame.source)

        themed = mask.colorize(Color.from_hex("#3a7bd5"))
    """

    def __init__(self, image: Image.Image, frames_count: int, frame_duration: int, canvas_size: int):
        if frame_duration <= 0:
            raise ValueError(f"frame_duration must be positive, got {frame_duration}")
        if frames_count <= 0:
            raise ValueError(f"frames_count must be positive, got {frames_count}")
        if canvas_size <= 0:
            raise ValueError(f"canvas_size must be positive, got {canvas_size}")
        if image.mode != ATLAS_MODE:
            raise ValueError(f"Atlas must be {ATLAS_MODE}, got {image.mode}")
        expected = atlas_size(frames_count, canvas_size)
        if image.size != expected:
            raise ValueError(f"Atlas size {image.size} does not match expected {expected}")

        self._image = image
        self._frames_count = frames_count
        self._frame_duration = frame_duration
        self._canvas_size = canvas_size

    # ------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------

    @classmethod
    def from_pixels(cls, pixels: np.ndarray, frames_count: int, frame_duration: int, canvas_size: int) -> NoiseMask:
        """
        Wrap a (height, width, 4) uint8 premultiplied array

        The array is copied into a new image, callers may reuse it.
        """
        if pixels.dtype != np.uint8 or pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Expected (h, w, 4) uint8 pixels, got {pixels.shape} {pixels.dtype}")
        height, width = pixels.shape[:2]
        image = Image.frombytes(ATLAS_MODE, (width, height), np.ascontiguousarray(pixels).tobytes())
        return cls(image, frames_count, frame_duration, canvas_size)

    # ------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------

    @property
    def image(self) -> Image.Image:
        return self._image

    @property
    def frames_count(self) -> int:
        return self._frames_count

    @property
    def frame_duration(self) -> int:
        return self._frame_duration

    @property
    def canvas_size(self) -> int:
        return self._canvas_size

    @property
    def loop_duration(self) -> int:
        return self._frames_count * self._frame_duration

    def pixels(self) -> np.ndarray:
        """Copy of the atlas as a (height, width, 4) uint8 premultiplied array"""
        width, height = self._image.size
        return np.frombuffer(self._image.tobytes(), dtype=np.uint8).reshape(height, width, 4).copy()

    def to_image(self) -> Image.Image:
        """Straight-alpha RGBA copy of the atlas for display or export"""
        return self._image.convert("RGBA")

    # ------------------------------------------------------------
    # Frame lookup
    # ------------------------------------------------------------

    def frame_at(self, index: int) -> MaskFrame:
        """Atlas region of frame `index` (wrapped into the loop)"""
        index = index % self._frames_count
        row = index // FRAMES_PER_ROW
        column = index - row * FRAMES_PER_ROW
        size = self._canvas_size
        return MaskFrame(
            image=self._image,
            index=index,
            source=(column * size, row * size, size, size),
        )

    def frame_index_at(self, time_ms: int) -> int:
        return (time_ms // self._frame_duration) % self._frames_count

    def current_frame(self, time_ms: Optional[int] = None) -> MaskFrame:
        """
        Frame for the current moment of the shared animation clock

        Args:
            time_ms: Override clock value (ms), mainly for tests
        """
        if time_ms is None:
            time_ms = now_ms()
        return self.frame_at(self.frame_index_at(time_ms))

    # ------------------------------------------------------------
    # Derived variants
    # ------------------------------------------------------------

    def _source_pixels(self) -> np.ndarray:
        # frame(0).image is the whole atlas, so variants keep every frame
        frame = self.frame_at(0)
        width, height = frame.image.size
        return np.frombuffer(frame.image.tobytes(), dtype=np.uint8).reshape(height, width, 4)

    def colorize(self, color: Color) -> NoiseMask:
        """
        New mask with every particle tinted by `color`

        Coverage comes from the source alpha, the color alpha scales it.
        """
        source_alpha = self._source_pixels()[..., 3].astype(np.uint32)
        r, g, b, a = color.to_rgba()

        alpha = (source_alpha * a + 127) // 255
        result = np.empty(source_alpha.shape + (4,), dtype=np.uint8)
        for channel, value in enumerate((r, g, b)):
            result[..., channel] = (alpha * value + 127) // 255
        result[..., 3] = alpha

        return NoiseMask.from_pixels(result, self._frames_count, self._frame_duration, self._canvas_size)

    def darken(self, alpha: int) -> NoiseMask:
        """
        New mask = translucent black layer with this mask painted over it

        Args:
            alpha: Opacity of the black layer (0-255)
        """
        if not 0 <= alpha <= 255:
            raise ValueError(f"Darken alpha out of range: {alpha}")

        source = self._source_pixels().astype(np.uint32)
        result = np.empty(source.shape, dtype=np.uint8)
        # SourceOver onto (0, 0, 0, alpha): color channels pass through unchanged
        result[..., :3] = source[..., :3]
        result[..., 3] = source[..., 3] + (alpha * (255 - source[..., 3]) + 127) // 255

        return NoiseMask.from_pixels(result, self._frames_count, self._frame_duration, self._canvas_size)

    def __repr__(self) -> str:
        return (
            f"NoiseMask(frames={self._frames_count}, "
            f"frame_duration={self._frame_duration}ms, "
            f"canvas={self._canvas_size}px, "
            f"atlas={self._image.size[0]}x{self._image.size[1]})"
        )
