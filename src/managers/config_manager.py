"""
Config Manager

Loads the noise mask YAML configuration and exposes typed accessors.
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from utils.logger import get_logger
from models.descriptor import GenerationDescriptor
from models.enums import LogCategory, LogLevel

log = get_logger().for_category(LogCategory.CONFIG)

MIB = 1024 * 1024


class ConfigManager:
    """
    Configuration manager for mask generation, caching and logging

    Loads config.yaml and falls back to factory_defaults.yaml when the main
    file is missing or broken.

    Example:
        config = ConfigManager()
        config.load()

        descriptor = config.default_descriptor()
        folder = config.cache_folder()      # None when caching is disabled
    """

    def __init__(self, config_path="config/config.yaml", defaults_path="config/factory_defaults.yaml"):
        """
        Initialize ConfigManager

        Args:
            config_path: Path to main config.yaml (relative to src/ unless absolute)
            defaults_path: Path to factory defaults fallback
        """
        self.config_path = Path(config_path)
        self.factory_defaults_path = Path(defaults_path)
        self.data: Dict[str, Any] = {}

    def _resolve(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        src_dir = Path(__file__).parent.parent
        return src_dir / path

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Top level of {path.name} must be a mapping")
        return data

    def load(self) -> Dict[str, Any]:
        """
        Load YAML configuration

        Returns:
            Config data dict
        """
        try:
            self.data = self._read_yaml(self._resolve(self.config_path))
            log.info("Loaded configuration", path=self.config_path)
        except Exception as ex:
            log.error("Failed to load config.yaml", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            self.data = self._read_yaml(self._resolve(self.factory_defaults_path))

        return self.data

    def _section(self, name: str) -> Dict[str, Any]:
        return self.data.get(name) or {}

    # =========================================================================
    # Mask generation
    # =========================================================================

    @property
    def display_scale(self) -> float:
        """Device scale factor applied to pixel sizes"""
        return float(self._section("display").get("scale", 1.0))

    def default_descriptor(self) -> GenerationDescriptor:
        """
        Descriptor of the default mask, pixel sizes multiplied by display scale

        Raises:
            KeyError: mask section incomplete
            ValueError: invalid values
        """
        mask = dict(self._section("mask"))
        scale = self.display_scale
        mask["canvas_size"] = int(round(float(mask["canvas_size"]) * scale))
        mask["particle_size_min"] = float(mask["particle_size_min"]) * scale
        mask["particle_size_max"] = float(mask["particle_size_max"]) * scale
        return GenerationDescriptor.from_dict(mask)

    @property
    def image_mask_darken_alpha(self) -> int:
        return int(self._section("image_mask").get("darken_alpha", 32))

    # =========================================================================
    # Disk cache
    # =========================================================================

    def cache_folder(self) -> Optional[Path]:
        """
        Folder holding the cached mask, None when caching is disabled

        Root resolution: cache.root, then $XDG_CACHE_HOME, then ~/.cache
        """
        cache = self._section("cache")
        if not cache.get("enabled", True):
            return None
        root = cache.get("root") or os.environ.get("XDG_CACHE_HOME") or "~/.cache"
        return Path(root).expanduser() / cache.get("folder", "noise_mask")

    @property
    def cache_file_name(self) -> str:
        return str(self._section("cache").get("file_name", "mask"))

    @property
    def cache_max_size(self) -> int:
        return int(self._section("cache").get("max_size", 5 * MIB))

    # =========================================================================
    # Logging
    # =========================================================================

    @property
    def log_level(self) -> LogLevel:
        name = str(self._section("logging").get("level", "INFO")).upper()
        try:
            return LogLevel[name]
        except KeyError:
            log.warn(f"Unknown log level '{name}', using INFO")
            return LogLevel.INFO

    @property
    def log_colors(self) -> bool:
        return bool(self._section("logging").get("colors", True))
