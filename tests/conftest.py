"""Shared fixtures for the notification hub test-suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from notification_hub.config import reset_settings_cache
from notification_hub.utils.clock import get_app_timezone


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Run every test with default settings, ignoring any local ``.env``."""

    monkeypatch.setenv("APP_TIMEZONE", "UTC")
    monkeypatch.setenv("API_BASE_URL", "http://backend.test/api")
    reset_settings_cache()
    get_app_timezone.cache_clear()
    yield
    reset_settings_cache()
    get_app_timezone.cache_clear()
