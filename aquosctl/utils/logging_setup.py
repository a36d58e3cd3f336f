"""
Logging setup with console and file handlers.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler

from aquosctl.config.models import LoggingConfig


def setup_logging(config: LoggingConfig) -> None:
    """
    Configure logging for the application.

    Log records go to stderr so that stdout carries only the tool's own
    output (dry-run frames, port listings).

    Args:
        config: Logging configuration.
    """
    logger = logging.getLogger()
    logger.setLevel(config.level)

    logger.handlers.clear()

    formatter = logging.Formatter(
        "[%(asctime)s] %(levelname)s [%(name)s]: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(config.level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if config.file:
        try:
            file_handler = RotatingFileHandler(
                config.file,
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                encoding="utf-8"
            )
            file_handler.setLevel(config.level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            logger.info(f"Logging to file: {config.file}")
        except IOError as e:
            logger.error(f"Failed to create log file {config.file}: {e}")

    logger.debug(f"Logging initialized at level: {config.level}")
