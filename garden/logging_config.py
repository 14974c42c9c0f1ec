"""
Logging Configuration
Sets up the logger shared by every ``garden`` module.
"""
import logging
import os
import sys
from typing import Mapping, Optional


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the logger for the 'garden' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    logger = logging.getLogger("garden")
    logger.setLevel(level)

    # Avoid duplicate handlers when main() runs more than once
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")


def setup_logging_from_env(environ: Optional[Mapping[str, str]] = None) -> int:
    """
    Configures logging from ``GARDEN_DEBUG`` and ``GARDEN_LOG_FILE``.

    Returns the level that was applied.
    """
    env = os.environ if environ is None else environ
    debug = env.get("GARDEN_DEBUG", "").strip().lower() in {"1", "true", "yes"}
    level = logging.DEBUG if debug else logging.INFO
    setup_logging(level, env.get("GARDEN_LOG_FILE") or None)
    return level
