"""
Color conversion utilities

Parsing helpers for tint colors read from config and theme files.
"""

from typing import Tuple


def hex_to_rgba(value: str) -> Tuple[int, int, int, int]:
    """
    Parse "#RRGGBB" or "#RRGGBBAA" (leading '#' optional)

    Raises:
        ValueError: if the string is not 6 or 8 hex digits
    """
    digits = value.lstrip('#')
    if len(digits) not in (6, 8):
        raise ValueError(f"Invalid hex color: {value}")
    try:
        channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
    except ValueError:
        raise ValueError(f"Invalid hex color: {value}")
    if len(channels) == 3:
        channels.append(255)
    return (channels[0], channels[1], channels[2], channels[3])
