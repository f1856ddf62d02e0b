"""FastAPI dependencies shared by the routers.

Tests replace these through ``app.dependency_overrides``.
"""

from __future__ import annotations

from core.providers import GoogleProvider, LLMConfig, LLMProvider
from src.config.settings import AppSettings, get_settings

__all__ = ["get_settings", "get_llm_config", "get_provider"]


def get_llm_config() -> LLMConfig:
    settings: AppSettings = get_settings()
    return LLMConfig(
        model=settings.gemini_model,
        api_base=settings.gemini_api_base,
        timeout_seconds=settings.provider_timeout_seconds,
    )


def get_provider() -> LLMProvider:
    """A fresh provider per request; nothing is shared between callers."""
    return GoogleProvider(default_config=get_llm_config())
