"""
Tests for the package logging setup.
"""

import logging

import pytest

from cheese_stack.logging_config import PACKAGE_LOGGER, setup_logging


@pytest.fixture(autouse=True)
def restore_package_logger():
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


class TestSetupLogging:
    """Handler and level configuration."""

    def test_level_by_name(self):
        logger = setup_logging("debug")
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG

    def test_repeat_calls_replace_handlers(self):
        setup_logging(logging.INFO)
        logger = setup_logging(logging.WARNING)
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_module_loggers_reach_log_file(self, tmp_path):
        log_file = tmp_path / "game.log"
        logger = setup_logging("INFO", log_file=str(log_file))
        assert len(logger.handlers) == 2

        logging.getLogger("cheese_stack.stack_core.game").info("Round started")
        logging.getLogger("cheese_stack.stack_core.game").debug("hidden")
        for handler in logger.handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "cheese_stack.stack_core.game - INFO - Round started" in text
        assert "hidden" not in text

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError):
            setup_logging("LOUD")
