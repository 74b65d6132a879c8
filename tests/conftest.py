"""Pytest configuration and fixtures.

Provides environment isolation and a fresh settings cache for every test.
All fixtures here are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
import os

import pytest

from scriptext.config import reset_settings

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "scriptext.config.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_settings_env(monkeypatch, tmp_path):
    """Clear SCRIPTEXT_* variables and point project config at an empty path."""
    for key in list(os.environ.keys()):
        if key.startswith("SCRIPTEXT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SCRIPTEXT_PYPROJECT_PATH", str(tmp_path / "missing-pyproject.toml"))
    reset_settings()
    yield
    reset_settings()


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def no_color(monkeypatch):
    """Force plain console output regardless of the terminal."""
    monkeypatch.setenv("SCRIPTEXT_COLOR", "never")
    reset_settings()
