from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_badgesync_logger():
    """Drop handlers installed by configure_logging so streams do not leak across tests."""
    yield
    logger = logging.getLogger("badgesync")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
