"""
Enums for noise mask generation and caching
"""

from enum import Enum, auto


class MaskCacheState(Enum):
    """
    Lifecycle of the process-wide default mask

    UNINITIALIZED: nothing started yet
    GENERATING: one background worker is reading the cache or generating
    READY: the finished mask is published (terminal)
    """
    UNINITIALIZED = auto()
    GENERATING = auto()
    READY = auto()


class MaskSource(Enum):
    """Where the published default mask came from"""
    DISK_CACHE = auto()
    GENERATED = auto()


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    GENERATOR = auto()   # Particle and sprite generation
    RENDER = auto()      # Atlas painting
    CODEC = auto()       # Binary serialization
    CACHE = auto()       # On-disk cache reads/writes
    MASK = auto()        # Default mask lifecycle
    SYSTEM = auto()      # Startup, shutdown, errors

    GENERAL = auto()    # Default general category
