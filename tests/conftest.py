"""Common test fixtures and configuration."""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient

from eventgate.config import GatewayConfig
from eventgate.main import create_app

from .test_events_common import FakeEventBus, create_test_event

# Set test environment
os.environ["LOG_LEVEL"] = "DEBUG"


@pytest.fixture(autouse=True)
def load_test_env():
    """Load test environment variables before each test"""
    root_dir = Path(__file__).parent.parent

    test_env_path = root_dir / ".env.test"
    if test_env_path.exists():
        load_dotenv(test_env_path)
    else:
        pytest.fail(f"Test environment file not found: {test_env_path}")

    yield


@pytest.fixture
def config():
    return GatewayConfig(
        error_schema_uri="/error/0.0.1",
        error_stream="eventgate.error",
        log_level="DEBUG",
    )


@pytest.fixture
def config_without_error_stream():
    return GatewayConfig(error_schema_uri="/error/0.0.1", error_stream=None)


@pytest.fixture
def fake_bus():
    return FakeEventBus()


@pytest.fixture
def test_event():
    return create_test_event


@pytest.fixture
def client(config, fake_bus):
    """Test client for an application backed by the fake event bus."""
    app = create_app(config, event_bus=fake_bus, configure_logging=False)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
