"""Logging setup. Modules just call logging.getLogger(__name__); the host application calls configure_logging() once."""

import logging
import sys

from src.core.config import settings

ROOT_LOGGER_NAME = "src"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a single stdout handler to the application logger. Calling it again only updates the level."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    logger.setLevel(log_level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger
