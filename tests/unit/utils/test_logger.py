"""
tests/unit/utils/test_logger.py

Unit tests for logger configuration.
"""

import logging

from tabrunner.config import Config
from tabrunner.utils.logger import get_logger


def test_get_logger_configures_once() -> None:
    logger = get_logger("tabrunner.tests.logger")
    again = get_logger("tabrunner.tests.logger")

    assert logger is again
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.StreamHandler)
    assert logger.level == Config.LOG_LEVEL
    assert logger.propagate is False
