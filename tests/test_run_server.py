from unittest.mock import patch

import pytest

import run_server


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Fixture to set up test environment variables"""
    monkeypatch.setenv("API_PORT", "9000")
    monkeypatch.setenv("API_HOST", "0.0.0.0")


@pytest.fixture
def mock_env_vars_default(monkeypatch):
    """Fixture to clear environment variables for testing defaults"""
    monkeypatch.delenv("API_PORT", raising=False)
    monkeypatch.delenv("API_HOST", raising=False)
    monkeypatch.delenv("EVENTGATE_CONFIG", raising=False)


def test_main_with_env_vars(mock_env_vars):
    """Test main function with environment variables set"""
    with patch("uvicorn.run") as mock_run:
        run_server.main()

        mock_run.assert_called_once_with(
            "eventgate.main:create_app",
            factory=True,
            host="0.0.0.0",
            port=9000,
            reload=False,
        )


def test_main_with_defaults(mock_env_vars_default):
    """Test main function with default values"""
    with patch("uvicorn.run") as mock_run:
        run_server.main()

        mock_run.assert_called_once_with(
            "eventgate.main:create_app",
            factory=True,
            host="127.0.0.1",
            port=8192,
            reload=False,
        )
