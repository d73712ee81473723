"""
Shared pytest fixtures and configuration for folio tests.

This module provides:
- Settings cache isolation between tests
- A fixed "current year" for date validation

Usage:
    Fixtures are auto-discovered by pytest. Simply use them as function
    arguments (pytest injects them automatically).
"""

import sys
from pathlib import Path

import pytest

# Ensure folio package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from folio.core.settings import get_settings


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark all tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep tests away from the user's ``~/.folio`` and any webhook config."""
    monkeypatch.setenv("FOLIO_DATABASE", str(tmp_path / "folio.db"))
    monkeypatch.delenv("FOLIO_ACTIVITY_WEBHOOK_URL", raising=False)
    monkeypatch.delenv("FOLIO_ACTIVITY_WEBHOOK_SECRET", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def current_year() -> int:
    return 2026
