import logging

import pytest

from fractalview.logging_setup import LOGGER_NAME
from fractalview.params import ViewportParameters, ViewportSnapshot


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Undo configure_logging() so caplog sees records in every test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def shallow_params():
    """Default view with a low depth so renders stay fast."""
    return ViewportParameters(ViewportSnapshot(depth=60))
