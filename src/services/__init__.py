"""Services layer"""

from .mask_codec import encode_mask, decode_mask, FORMAT_VERSION
from .mask_cache_store import MaskCacheStore
from .default_mask_cache import (
    DefaultMaskCache,
    MaskGenerationError,
    get_default_mask_cache,
    default_mask,
    default_image_mask,
    prepare_default_mask,
)

__all__ = [
    "encode_mask",
    "decode_mask",
    "FORMAT_VERSION",
    "MaskCacheStore",
    "DefaultMaskCache",
    "MaskGenerationError",
    "get_default_mask_cache",
    "default_mask",
    "default_image_mask",
    "prepare_default_mask",
]
