"""Pytest configuration and shared fixtures for openveo-client tests."""

import pytest

from openveo_client.testing import MockWebService


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear OpenVeo and test environment variables before each test.

    This prevents test pollution when testing settings resolution.
    """
    import os

    test_prefixes = ("TEST_", "OPENVEO_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def service():
    """A reachable fake Web Service accepting the default credentials."""
    return MockWebService()


@pytest.fixture
def client(service):
    """A client bound to the fake Web Service, closed after the test."""
    with service.client() as client:
        yield client
