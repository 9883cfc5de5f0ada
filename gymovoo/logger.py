"""Loguru sinks for the plan engine."""

import sys

from loguru import logger

from gymovoo.config import LOG_FILE, LOG_LEVEL

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <cyan>{name}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {name}:{line} - {message}"


def setup_logger(level: str = "INFO", log_file: str | None = None) -> None:
    """Send engine logs to stderr, and to `log_file` as well when one is set."""
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level)
    if log_file:
        logger.add(log_file, format=FILE_FORMAT, level=level, rotation="10 MB")


def configure_from_env() -> None:
    setup_logger(level=LOG_LEVEL, log_file=LOG_FILE)
