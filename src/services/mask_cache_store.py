"""Mask cache store - single-file on-disk cache of the default noise mask"""

from pathlib import Path
from typing import Optional

from models.descriptor import MaskValidator
from models.enums import LogCategory
from models.mask import NoiseMask
from services.mask_codec import decode_mask, encode_mask
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.CACHE)

DEFAULT_FILE_NAME = "mask"
MAX_CACHE_SIZE = 5 * 1024 * 1024


class MaskCacheStore:
    """
    Reads and writes one serialized mask file.

    Every failure is soft: read() returns None and write() returns False,
    the caller falls back to generating in memory.

    Example:
        store = MaskCacheStore(Path.home() / ".cache" / "noise_mask")
        mask = store.read(descriptor.validator())
        if mask is None:
            mask = generate_noise_mask(descriptor)
            store.write(mask)
    """

    def __init__(
        self,
        folder: Optional[Path],
        file_name: str = DEFAULT_FILE_NAME,
        max_size: int = MAX_CACHE_SIZE,
    ):
        """
        Args:
            folder: Cache folder, None disables the store
            file_name: Name of the cache file inside folder
            max_size: Byte cap for both reading and writing
        """
        self.folder = Path(folder) if folder is not None else None
        self.file_name = file_name
        self.max_size = max_size

    @property
    def enabled(self) -> bool:
        return self.folder is not None

    @property
    def path(self) -> Optional[Path]:
        return self.folder / self.file_name if self.folder is not None else None

    def read(self, validator: Optional[MaskValidator] = None) -> Optional[NoiseMask]:
        """Load and decode the cached mask, None when missing or unusable"""
        path = self.path
        if path is None:
            return None

        try:
            with open(path, "rb") as f:
                size = f.seek(0, 2)
                if size > self.max_size:
                    log.debug("Cached mask exceeds size cap", path=path, size=size, max_size=self.max_size)
                    return None
                f.seek(0)
                data = f.read()
        except FileNotFoundError:
            log.debug("No cached mask", path=path)
            return None
        except OSError as e:
            log.warn("Failed to read cached mask", path=path, error=str(e))
            return None

        mask = decode_mask(data, validator)
        if mask is None:
            log.info("Cached mask unusable, will regenerate", path=path)
        else:
            log.info("Loaded cached mask", path=path, size=len(data))
        return mask

    def write(self, mask: NoiseMask) -> bool:
        """Serialize and store the mask, False when skipped or failed"""
        path = self.path
        if path is None:
            return False

        try:
            self.folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            log.warn("Cannot create cache folder", folder=self.folder, error=str(e))
            return False

        data = encode_mask(mask)
        if len(data) > self.max_size:
            log.debug("Serialized mask exceeds size cap, not persisted", size=len(data), max_size=self.max_size)
            return False

        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            log.warn("Failed to write cached mask", path=path, error=str(e))
            return False

        log.info("Saved cached mask", path=path, size=len(data))
        return True
