import logging

import pytest

from mqtt_replayer.logger import LOGGER_NAME
from tests.helpers import FakeTransport


@pytest.fixture
def fake_transport_cls():
    FakeTransport.instances = []
    yield FakeTransport
    FakeTransport.instances = []


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
