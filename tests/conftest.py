"""Shared pytest configuration and fixtures for gateway tests."""

import pytest
from fastapi.testclient import TestClient

# Import HTTP mocking fixtures from fixtures module
pytest_plugins = ["tests.fixtures.mock_http"]

from tests.config import DEFAULT_TEST_CONFIG  # noqa: E402

GATEWAY_ENV_VARS = (
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "LOG_REQUEST_METRICS",
    "GEMINI_API_KEYS",
    "GEMINI_API_KEY",
    "GEMINI_BASE_URL",
    "PROXY_API_KEY",
    "REQUEST_TIMEOUT",
    "MAX_RETRIES",
    "KEY_COOLDOWN_SECONDS",
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests (fast, no external deps)")


def pytest_collection_modifyitems(config, items):
    """Add the unit marker to everything under tests/unit/."""
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def clean_gateway_env(monkeypatch):
    """Start every test from the default test environment.

    Gateway variables from the developer's shell or .env file are removed so
    they cannot leak into a Config built by a test.
    """
    for name in GATEWAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name, value in DEFAULT_TEST_CONFIG.items():
        monkeypatch.setenv(name, value)


@pytest.fixture
def gateway_config(monkeypatch):
    """Build a fresh Config after applying environment overrides.

    Example:
        def test_something(gateway_config):
            cfg = gateway_config(PROXY_API_KEY="secret")
    """
    from gemini_gateway.core.config import Config

    def _build(**overrides: str | None) -> Config:
        for name, value in overrides.items():
            if value is None:
                monkeypatch.delenv(name, raising=False)
            else:
                monkeypatch.setenv(name, value)
        return Config()

    return _build


@pytest.fixture
def gateway_client(gateway_config):
    """TestClient factory over a freshly built app.

    Example:
        def test_health(gateway_client):
            client = gateway_client()
            assert client.get("/health").status_code == 200
    """
    from gemini_gateway.main import create_app

    clients: list[TestClient] = []

    def _build(**overrides: str | None) -> TestClient:
        client = TestClient(create_app(gateway_config(**overrides)))
        clients.append(client)
        return client

    yield _build

    for client in clients:
        client.close()
