"""
Default mask cache - process-wide, lazily prepared default noise mask

State machine:

    UNINITIALIZED --prepare()--> GENERATING --worker done--> READY

One background thread reads the on-disk cache or generates the mask, then
publishes it and wakes every blocked reader. Once READY, get() is a plain
attribute read with no locking. There is no teardown; the cache lives until
the process exits.
"""

import threading
from typing import Callable, Optional, Tuple

from models.descriptor import GenerationDescriptor
from models.enums import LogCategory, MaskCacheState, MaskSource
from models.mask import NoiseMask
from engine.atlas_renderer import generate_noise_mask
from managers.config_manager import ConfigManager
from services.mask_cache_store import MaskCacheStore
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.MASK)

IMAGE_MASK_DARKEN_ALPHA = 32


class MaskGenerationError(RuntimeError):
    """The background worker failed, no default mask will be published"""


class DefaultMaskCache:
    """
    Write-once, read-many holder of the default NoiseMask.

    Example:
        cache = DefaultMaskCache(descriptor, MaskCacheStore(folder))
        cache.prepare()              # start background work early
        ...
        mask = cache.get()           # blocks only until the worker publishes
        overlay = cache.get_image_mask()
    """

    def __init__(
        self,
        descriptor: GenerationDescriptor,
        store: MaskCacheStore,
        generate: Callable[[GenerationDescriptor], NoiseMask] = generate_noise_mask,
        darken_alpha: int = IMAGE_MASK_DARKEN_ALPHA,
    ):
        """
        Args:
            descriptor: Parameters of the default mask
            store: On-disk cache (may be disabled)
            generate: Generation pipeline, injectable for tests
            darken_alpha: Black layer opacity of the image mask variant
        """
        self.descriptor = descriptor
        self.store = store
        self._generate = generate
        self._darken_alpha = darken_alpha

        # Publication slot, assigned exactly once with a fully built mask
        self._mask: Optional[NoiseMask] = None
        self._error: Optional[BaseException] = None
        self._state = MaskCacheState.UNINITIALIZED
        self._source: Optional[MaskSource] = None

        self._lock = threading.Lock()
        self._ready = threading.Condition(self._lock)
        self._worker: Optional[threading.Thread] = None

        self._image_mask: Optional[NoiseMask] = None
        self._image_mask_lock = threading.Lock()

    # ------------------------------------------------------------
    # State
    # ------------------------------------------------------------

    @property
    def state(self) -> MaskCacheState:
        return self._state

    @property
    def source(self) -> Optional[MaskSource]:
        """DISK_CACHE or GENERATED once READY"""
        return self._source

    @property
    def is_ready(self) -> bool:
        return self._mask is not None

    # ------------------------------------------------------------
    # Background work
    # ------------------------------------------------------------

    def prepare(self) -> bool:
        """
        Start the background worker if nothing started it yet

        Returns:
            True if this call started the worker
        """
        with self._lock:
            if self._state is not MaskCacheState.UNINITIALIZED:
                return False
            self._state = MaskCacheState.GENERATING
            self._worker = threading.Thread(
                target=self._run,
                daemon=True,
                name="DefaultMaskWorker",
            )
            self._worker.start()

        log.debug("Default mask worker started")
        return True

    def _load_or_generate(self) -> Tuple[NoiseMask, MaskSource]:
        cached = self.store.read(self.descriptor.validator())
        if cached is not None:
            return cached, MaskSource.DISK_CACHE
        return self._generate(self.descriptor), MaskSource.GENERATED

    def _run(self) -> None:
        try:
            mask, source = self._load_or_generate()
        except Exception as e:
            log.error("Default mask generation failed", error=str(e), error_type=type(e).__name__)
            with self._lock:
                self._error = e
                self._ready.notify_all()
            return

        with self._lock:
            self._source = source
            self._state = MaskCacheState.READY
            self._mask = mask
            self._ready.notify_all()

        log.info("Default mask ready", source=source.name, mask=repr(mask))

        # Persist after readers are released
        if source is MaskSource.GENERATED:
            self.store.write(mask)

    # ------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------

    def get(self) -> NoiseMask:
        """
        The default mask, blocking until it is published

        Raises:
            MaskGenerationError: the worker failed
        """
        mask = self._mask
        if mask is not None:
            return mask

        self.prepare()
        with self._lock:
            while self._mask is None:
                if self._error is not None:
                    raise MaskGenerationError("Default mask generation failed") from self._error
                self._ready.wait()
            return self._mask

    def get_image_mask(self) -> NoiseMask:
        """Darkened variant used over obscured images, computed once"""
        image_mask = self._image_mask
        if image_mask is not None:
            return image_mask

        mask = self.get()
        with self._image_mask_lock:
            if self._image_mask is None:
                self._image_mask = mask.darken(self._darken_alpha)
            return self._image_mask


# === Process-wide handle ===
_default_cache: Optional[DefaultMaskCache] = None
_default_cache_lock = threading.Lock()


def create_default_mask_cache(config_manager: Optional[ConfigManager] = None) -> DefaultMaskCache:
    """Build a DefaultMaskCache from configuration (config.yaml when None)"""
    if config_manager is None:
        config_manager = ConfigManager()
        config_manager.load()

    store = MaskCacheStore(
        config_manager.cache_folder(),
        file_name=config_manager.cache_file_name,
        max_size=config_manager.cache_max_size,
    )
    return DefaultMaskCache(
        config_manager.default_descriptor(),
        store,
        darken_alpha=config_manager.image_mask_darken_alpha,
    )


def get_default_mask_cache() -> DefaultMaskCache:
    """The process-wide DefaultMaskCache, created from config on first use"""
    global _default_cache
    cache = _default_cache
    if cache is not None:
        return cache
    with _default_cache_lock:
        if _default_cache is None:
            _default_cache = create_default_mask_cache()
        return _default_cache


def set_default_mask_cache(cache: DefaultMaskCache) -> None:
    """Install the process-wide cache (before any reader asks for it)"""
    global _default_cache
    with _default_cache_lock:
        _default_cache = cache


def prepare_default_mask() -> None:
    get_default_mask_cache().prepare()


def default_mask() -> NoiseMask:
    return get_default_mask_cache().get()


def default_image_mask() -> NoiseMask:
    return get_default_mask_cache().get_image_mask()
