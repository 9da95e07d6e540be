"""Root conftest — shared test configuration and fixtures.

Invariants:
    - Every test starts with no registered transport and a fresh Settings cache
"""

import os

import pytest

from fetchview.config import get_settings
from fetchview.infrastructure.provider import reset_transport

from tests.fakes import FakeTransport, StateRecorder

# Ensure tests never pick up a developer's real endpoint
os.environ.setdefault("FETCHVIEW_BASE_URL", "http://fetchview.test")


@pytest.fixture(autouse=True)
def _isolated_provider():
    reset_transport()
    get_settings.cache_clear()
    yield
    reset_transport()
    get_settings.cache_clear()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def recorder():
    return StateRecorder()
