"""
BufferedRandom - batch of random 32-bit words drawn up front.

The generator needs a known number of bounded draws (three per particle), so
the whole batch is fetched in one call and handed out by index. Running past
the batch is a sizing bug and raises instead of silently reusing words.
"""

from typing import Optional

import numpy as np


class RandomBufferExhaustedError(RuntimeError):
    """More draws were requested than the buffer was sized for"""


class BufferedRandom:
    """
    Example:
        random = BufferedRandom(particles_count * 3)
        x = random.index(canvas_size)
    """

    def __init__(self, count: int, rng: Optional[np.random.Generator] = None):
        """
        Args:
            count: Number of draws this buffer must serve
            rng: Source of raw words (OS-seeded default_rng when None)
        """
        if count < 0:
            raise ValueError(f"Buffer size must not be negative, got {count}")
        rng = rng if rng is not None else np.random.default_rng()
        self._words = rng.integers(0, 1 << 32, size=count, dtype=np.uint64)
        self._position = 0

    @property
    def remaining(self) -> int:
        return len(self._words) - self._position

    def next_word(self) -> int:
        """Next raw 32-bit word"""
        if self._position >= len(self._words):
            raise RandomBufferExhaustedError(
                f"Random buffer of {len(self._words)} words exhausted"
            )
        word = int(self._words[self._position])
        self._position += 1
        return word

    def index(self, limit: int) -> int:
        """Uniform index in [0, limit)"""
        if limit <= 0:
            raise ValueError(f"Index limit must be positive, got {limit}")
        return (self.next_word() * limit) >> 32
