"""Pytest configuration and shared fixtures.

This module provides:
- Common test fixtures for data directories, sample payloads, and mocks
- Pytest markers for test categorization (unit, integration, slow)
"""
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator
from unittest.mock import MagicMock

import pytest

from tests.mocks import MockNightscoutClient, MockPresenter, MockTrayHandle

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: mark test as a unit test (fast, isolated)")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "macos_only: mark test as requiring macOS")


# =============================================================================
# Directory and Path Fixtures
# =============================================================================


@pytest.fixture
def temp_data_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def icon_dir(temp_data_dir: Path) -> Path:
    """Directory rendered icons are written to."""
    return temp_data_dir / "icons"


@pytest.fixture(autouse=True)
def clear_url_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's NIGHTSCOUT_URL from leaking into tests."""
    monkeypatch.delenv("NIGHTSCOUT_URL", raising=False)


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_properties() -> Dict[str, Any]:
    """A properties payload with a rising reading."""
    return {
        "bgnow": {"sgvs": [{"scaled": 120, "mills": 1700000000000}]},
        "delta": {"display": "+2", "absolute": 2, "scaled": 2},
        "direction": {"value": "FortyFiveUp", "label": "↗"},
    }


@pytest.fixture
def missing_reading_properties() -> Dict[str, Any]:
    """A properties payload whose reading has no scaled value."""
    return {
        "bgnow": {"sgvs": [{"mills": 1700000000000}]},
        "delta": {"display": "+2"},
        "direction": {"value": "Flat", "label": "→"},
    }


# =============================================================================
# Component Mocks
# =============================================================================


@pytest.fixture
def mock_client(sample_properties: Dict[str, Any]) -> MockNightscoutClient:
    """A client that answers every fetch with sample_properties."""
    return MockNightscoutClient(response=sample_properties)


@pytest.fixture
def mock_handle() -> MockTrayHandle:
    return MockTrayHandle()


@pytest.fixture
def mock_presenter() -> MockPresenter:
    return MockPresenter()


@pytest.fixture
def mock_event_bus() -> MagicMock:
    """Create a mock event bus for testing event-driven components."""
    mock_bus = MagicMock()
    mock_bus.publish = MagicMock()
    mock_bus.subscribe = MagicMock()
    mock_bus.unsubscribe = MagicMock()
    return mock_bus


@pytest.fixture
def mock_rumps_app() -> MagicMock:
    """Create a mock rumps.App for status bar testing."""
    mock_app = MagicMock()
    mock_app.title = "--"
    mock_app.icon = None
    return mock_app
