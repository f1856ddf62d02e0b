"""LLM Provider interface -- abstract base for model backends.

A provider turns one prompt into one :class:`LLMResponse`.  The query
handler receives a provider by dependency injection, so tests can pass
a fake and the HTTP layer can swap backends.

Credentials are passed per call and are never stored on the provider.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class LLMConfig:
    """Immutable configuration for a single LLM call."""

    model: str = "gemini-1.5-flash-latest"
    api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_seconds: Optional[float] = None


@dataclass
class LLMResponse:
    """Standardised response from any LLM provider.

    ``raw_text`` is the generated text when the model produced any.
    ``prompt_feedback`` carries provider safety metadata when generation
    was withheld.  The remaining fields identify the call for the audit
    log line written by the query handler.
    """

    raw_text: Optional[str] = None
    prompt_feedback: Optional[Dict[str, Any]] = None
    model: str = ""
    provider: str = ""
    latency_ms: int = 0
    prompt_hash: str = ""


class LLMProvider(abc.ABC):
    """Abstract base class for LLM providers.

    Subclasses must implement ``generate``.
    """

    provider_name: str = "base"

    @abc.abstractmethod
    def generate(
        self,
        prompt: str,
        *,
        api_key: str,
        config: Optional[LLMConfig] = None,
    ) -> LLMResponse:
        """Send a prompt and return the provider's answer.

        Exactly one request is made; there is no retry.

        Parameters
        ----------
        prompt : str
            Complete prompt text.
        api_key : str
            Caller-supplied credential, used for this call only.
        config : LLMConfig, optional
            Override default config for this call.

        Raises
        ------
        LLMHTTPError
            The provider answered with an error status.
        LLMUnreachableError
            No response was received.
        LLMRequestSetupError
            The request could not be built or sent.
        """
        ...


class LLMError(Exception):
    """Base exception for LLM provider errors."""

    def __init__(self, message: str, provider: str = ""):
        super().__init__(message)
        self.message = message
        self.provider = provider


class LLMHTTPError(LLMError):
    """Provider responded with an error status."""

    def __init__(self, message: str, status_code: int, provider: str = ""):
        super().__init__(message, provider=provider)
        self.status_code = status_code


class LLMUnreachableError(LLMError):
    """No response was received (connection failure or transport timeout)."""


class LLMRequestSetupError(LLMError):
    """The request failed before it was sent."""
