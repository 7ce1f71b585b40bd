"""
main.py - Entry point for the noise mask service
------------------------------------------------

Responsible for:
- loading configuration and configuring the logger
- installing the process-wide default mask cache
- warming it up (disk cache or generation) and reporting the result
"""

import sys

# Set UTF-8 encoding for output before logging (tree symbols in details)
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore

import time

from managers import ConfigManager
from models.enums import LogCategory
from services.default_mask_cache import create_default_mask_cache, set_default_mask_cache
from utils.logger import get_logger, configure_logger

log = get_logger().for_category(LogCategory.SYSTEM)


def main() -> int:
    config = ConfigManager()
    config.load()
    configure_logger(config.log_level, config.log_colors)

    cache = create_default_mask_cache(config)
    set_default_mask_cache(cache)

    started = time.perf_counter()
    cache.prepare()
    mask = cache.get()
    image_mask = cache.get_image_mask()

    log.info(
        "Default mask available",
        source=cache.source.name if cache.source else None,
        mask=repr(mask),
        image_mask=repr(image_mask),
        current_frame=mask.current_frame().index,
        wait_ms=f"{(time.perf_counter() - started) * 1000:.0f}",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
