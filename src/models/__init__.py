"""
Models package - Data models for noise mask generation
"""

from .enums import MaskCacheState, MaskSource, LogLevel, LogCategory
from .color import Color
from .descriptor import GenerationDescriptor, MaskValidator
from .particle import Particle
from .frame import MaskFrame
from .mask import NoiseMask

__all__ = [
    'MaskCacheState',
    'MaskSource',
    'LogLevel',
    'LogCategory',
    'Color',
    'GenerationDescriptor',
    'MaskValidator',
    'Particle',
    'MaskFrame',
    'NoiseMask',
]
