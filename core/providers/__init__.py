"""LLM Provider abstraction layer.

Currently backed by the Google Gemini REST API, behind an interface
that lets the query handler accept any provider.
"""

from .base import (
    LLMConfig,
    LLMError,
    LLMHTTPError,
    LLMProvider,
    LLMRequestSetupError,
    LLMResponse,
    LLMUnreachableError,
)
from .google_provider import GoogleProvider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "LLMConfig",
    "LLMError",
    "LLMHTTPError",
    "LLMUnreachableError",
    "LLMRequestSetupError",
    "GoogleProvider",
]
