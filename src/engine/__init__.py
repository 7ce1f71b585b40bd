"""Generation engine - random source, particle/sprite generator, atlas renderer"""

from .random_source import BufferedRandom, RandomBufferExhaustedError
from .atlas_renderer import AtlasRenderer, generate_noise_mask

__all__ = ['BufferedRandom', 'RandomBufferExhaustedError', 'AtlasRenderer', 'generate_noise_mask']
