"""Logging configuration."""

import sys

from loguru import logger

from settings import LOG_DIR, LOG_RETENTION

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {process} | {level: <7} | {name}:{function}:{line} | {message}"


def setup_logging(level: str = "INFO", to_file: bool = True):
    """Console sink at ``level``; optionally a daily DEBUG file shared by every instance on the host."""
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        # several refresher processes may append to the same file
        logger.add(
            LOG_DIR / "badges_{time:YYYY-MM-DD}.log",
            format=FILE_FORMAT,
            level="DEBUG",
            rotation="00:00",
            retention=LOG_RETENTION,
            compression="gz",
            enqueue=True,
        )
        logger.debug("Logging to {} (retention {})", LOG_DIR, LOG_RETENTION)

    return logger
