"""Logging configuration."""

import sys
from pathlib import Path

from loguru import logger

from settings import LOG_FILE

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <level>{message}</level>"
# Same line layout as the debug trail of earlier releases: "20240101120000: message"
DEBUG_FORMAT = "{time:YYYYMMDDHHmmss}: {message}"


def setup_logging(debug: bool = False, log_file: Path = LOG_FILE):
    """Console output at INFO, plus an appended debug trail in log_file when debug is set.

    Only the debug trail records individual OCI commands and history hits.
    """
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level="INFO", colorize=True)

    if debug:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, format=DEBUG_FORMAT, level="DEBUG", mode="a", encoding="utf-8")
        logger.info("Debug log: {}", log_file)

    return logger
