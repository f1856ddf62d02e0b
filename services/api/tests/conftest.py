"""Shared fixtures for API integration tests.

Uses FastAPI TestClient (in-memory, no network) so tests run
without a live server or a real Gemini key.
"""

from __future__ import annotations

import os
import sys

import pytest

# Ensure project root is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from core.providers import LLMConfig  # noqa: E402
from src.config.settings import AppSettings  # noqa: E402
from tests.fakes import FakeProvider  # noqa: E402


@pytest.fixture()
def api_settings(tmp_path):
    """Settings with an isolated scratch directory and a small upload ceiling."""
    return AppSettings(upload_dir=str(tmp_path / "uploads"), max_upload_bytes=64 * 1024)


@pytest.fixture()
def provider():
    return FakeProvider()


@pytest.fixture()
def client(api_settings, provider):
    """FastAPI TestClient with settings and provider overridden."""
    from fastapi.testclient import TestClient

    from services.api.app.deps import get_llm_config, get_provider, get_settings
    from services.api.app.main import app

    app.dependency_overrides[get_settings] = lambda: api_settings
    app.dependency_overrides[get_provider] = lambda: provider
    app.dependency_overrides[get_llm_config] = lambda: LLMConfig()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
