"""
Utility functions for noise mask generation
"""

from .colors import hex_to_rgba

__all__ = [
    'hex_to_rgba',
]
