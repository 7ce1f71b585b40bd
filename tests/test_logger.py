"""
Tests for the structured logger singleton
"""

import pytest

from models.enums import LogCategory, LogLevel
from utils.logger import configure_logger, get_category_logger, get_logger


@pytest.fixture(autouse=True)
def restore_logger():
    logger = get_logger()
    saved = (logger.min_level, logger.use_colors)
    configure_logger(LogLevel.INFO, use_colors=False)
    yield
    configure_logger(*saved)


def test_singleton():
    assert get_logger() is get_logger()


def test_configure_keeps_bound_loggers_valid(capsys):
    log = get_category_logger(LogCategory.CACHE)
    log.debug("hidden")
    assert capsys.readouterr().out == ""

    configure_logger(LogLevel.DEBUG, use_colors=False)
    log.debug("shown")
    assert "shown" in capsys.readouterr().out


def test_details_are_rendered_as_tree(capsys):
    get_logger().for_category(LogCategory.CODEC).info("Saved cached mask", path="/tmp/mask", size=1234)
    lines = capsys.readouterr().out.splitlines()

    assert "CODEC" in lines[0]
    assert lines[0].endswith("Saved cached mask")
    assert lines[1].strip() == "├─ path: /tmp/mask"
    assert lines[2].strip() == "└─ size: 1234"


def test_level_filter(capsys):
    configure_logger(LogLevel.WARN, use_colors=False)
    log = get_category_logger(LogCategory.MASK)
    log.info("quiet")
    log.error("loud")

    out = capsys.readouterr().out
    assert "quiet" not in out
    assert "loud" in out


def test_no_colors_means_no_escape_codes(capsys):
    get_category_logger(LogCategory.SYSTEM).warn("plain")
    assert "\033[" not in capsys.readouterr().out


def test_category_override(capsys):
    get_category_logger(LogCategory.CACHE).log("moved", category=LogCategory.RENDER)
    assert "RENDER" in capsys.readouterr().out
