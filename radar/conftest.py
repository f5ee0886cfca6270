"""Pytest configuration for radar tests."""

import os

import pytest

from radar.config import get_settings


@pytest.fixture(autouse=True)
def reset_env(request):
    """Reset environment variables and cached settings between tests."""
    original = os.environ.copy()
    if "integration" not in request.keywords:
        # Unit tests never talk to the real provider
        os.environ.pop("SKIDDLE_API_KEY", None)
        os.environ.pop("RADAR_DEMO_MODE", None)
    get_settings.cache_clear()
    yield
    os.environ.clear()
    os.environ.update(original)
    get_settings.cache_clear()
