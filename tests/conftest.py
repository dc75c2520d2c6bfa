import logging

import pytest


@pytest.fixture
def clean_logger():
    """Give a test the package logger without handlers, restore it afterwards."""
    logger = logging.getLogger("streamcov")
    saved_handlers = logger.handlers[:]
    saved_level = logger.level
    logger.handlers = []
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)
