"""Test configuration and fixtures."""

import os

# Must be set before core.logging is imported
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DISABLE_TRACING", "1")

import pytest
from fastapi.testclient import TestClient

from core import logging as core_logging
from core.dependencies import clear_settings
from main import app


class FakeTransport:
    """Stands in for ssl_post; records every call and replays a canned body."""

    def __init__(self, response: str = ""):
        self.response = response
        self.calls = []

    def __call__(self, url, data, headers=None, **kwargs):
        self.calls.append({"url": url, "data": data, "headers": headers, **kwargs})
        return self.response


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Setup test environment variables before each test."""
    original_env = dict(os.environ)

    os.environ.update(
        {
            "ENVIRONMENT": "test",
            "DISABLE_TRACING": "1",
            "APP_NAME": "Test Gateway Helpers",
        }
    )
    os.environ.pop("INTEGRATION_MODE", None)
    clear_settings()

    yield

    clear_settings()
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def log_output():
    """Events logged during the test (see core.logging.test_output_processor)."""
    core_logging.test_output.clear()
    yield core_logging.test_output
    core_logging.test_output.clear()


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
