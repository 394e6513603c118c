"""Unit tests for src/core/log.py"""

import logging
from typing import Iterator

import pytest

from src.core.log import ROOT_LOGGER_NAME, configure_logging


@pytest.fixture
def app_logger() -> Iterator[logging.Logger]:
    """Leave the application logger the way it was found"""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    logger.handlers.clear()
    try:
        yield logger
    finally:
        logger.handlers[:] = handlers
        logger.setLevel(level)


def test_configure_logging_attaches_one_handler(app_logger: logging.Logger) -> None:
    assert configure_logging("warning") is app_logger
    assert len(app_logger.handlers) == 1
    assert app_logger.level == logging.WARNING

    configure_logging("debug")
    assert len(app_logger.handlers) == 1
    assert app_logger.level == logging.DEBUG


def test_module_loggers_propagate_to_app_logger(
    app_logger: logging.Logger, caplog: pytest.LogCaptureFixture
) -> None:
    configure_logging("info")
    with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
        logging.getLogger("src.xiangqi.game").info("Game over")
    assert "Game over" in caplog.text
