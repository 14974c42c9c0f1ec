"""
Tests for the logging set-up.
"""

import logging

import pytest

from garden.logging_config import setup_logging_from_env


@pytest.fixture
def garden_logger():
    logger = logging.getLogger("garden")
    yield logger
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


class TestSetupLoggingFromEnv:
    def test_default_level_is_info(self, garden_logger):
        assert setup_logging_from_env({}) == logging.INFO
        assert garden_logger.level == logging.INFO
        assert len(garden_logger.handlers) == 1

    def test_debug_flag(self, garden_logger):
        assert setup_logging_from_env({"GARDEN_DEBUG": "yes"}) == logging.DEBUG

    def test_log_file(self, garden_logger, tmp_path):
        path = tmp_path / "garden.log"
        setup_logging_from_env({"GARDEN_LOG_FILE": str(path)})
        logging.getLogger("garden.store").warning("clamped")
        for handler in garden_logger.handlers:
            handler.flush()
        assert len(garden_logger.handlers) == 2
        assert "garden.store - WARNING - clamped" in path.read_text(encoding="utf-8")

    def test_repeated_setup_does_not_duplicate_handlers(self, garden_logger):
        setup_logging_from_env({})
        setup_logging_from_env({})
        assert len(garden_logger.handlers) == 1
