"""Google Gemini provider -- REST ``generateContent`` over requests.

The credential travels as the ``key`` query parameter, as the Gemini
REST API expects.  It is redacted from every message this module
produces.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from typing import Any, Dict, Optional

import requests

from .base import (
    LLMConfig,
    LLMHTTPError,
    LLMProvider,
    LLMRequestSetupError,
    LLMResponse,
    LLMUnreachableError,
)

logger = logging.getLogger(__name__)

_REDACTED = "***"


def _redact(text: str, secret: str) -> str:
    if secret:
        return text.replace(secret, _REDACTED)
    return text


def collect_candidate_text(payload: Dict[str, Any]) -> Optional[str]:
    """Return ``candidates[0].content.parts[0].text`` if it is a non-empty string."""
    candidates = payload.get("candidates") or []
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0] if isinstance(candidates[0], dict) else {}
    parts = (first.get("content") or {}).get("parts") or []
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    if isinstance(text, str) and text.strip():
        return text
    return None


def _error_message(response: requests.Response) -> str:
    """Pull ``error.message`` out of an error body, falling back to the raw body."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or (response.reason or "")
    if isinstance(body, dict):
        error_payload = body.get("error")
        if isinstance(error_payload, dict):
            message = error_payload.get("message")
            if isinstance(message, str) and message.strip():
                return message.strip()
    return json.dumps(body, separators=(",", ":"))


class GoogleProvider(LLMProvider):
    """LLM Provider backed by the Gemini REST API.

    Parameters
    ----------
    default_config : LLMConfig, optional
        Model, API base and timeout used when a call passes no config.
    session : requests.Session, optional
        Transport to use; a new session is created when omitted.
    """

    provider_name = "google"

    def __init__(
        self,
        default_config: Optional[LLMConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.default_config = default_config or LLMConfig()
        self._session = session or requests.Session()

    def endpoint(self, config: LLMConfig) -> str:
        return f"{config.api_base.rstrip('/')}/models/{config.model}:generateContent"

    def generate(
        self,
        prompt: str,
        *,
        api_key: str,
        config: Optional[LLMConfig] = None,
    ) -> LLMResponse:
        cfg = config or self.default_config
        prompt_hash = hashlib.sha256(prompt.encode()).hexdigest()[:16]
        body = {"contents": [{"parts": [{"text": prompt}]}]}

        logger.info("Sending request to Gemini API: %s (prompt %s)", cfg.model, prompt_hash)
        t0 = time.time()
        try:
            response = self._session.post(
                self.endpoint(cfg),
                params={"key": api_key},
                json=body,
                headers={"Content-Type": "application/json"},
                timeout=cfg.timeout_seconds,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.error("Gemini API unreachable: %s", type(exc).__name__)
            raise LLMUnreachableError(
                "No response received from API server.",
                provider=self.provider_name,
            ) from None
        except (requests.RequestException, TypeError, ValueError) as exc:
            detail = _redact(str(exc), api_key)
            logger.error("Gemini API request could not be sent: %s", detail)
            raise LLMRequestSetupError(detail, provider=self.provider_name) from None

        latency_ms = int((time.time() - t0) * 1000)

        if response.status_code >= 400:
            message = _redact(_error_message(response), api_key)
            logger.error(
                "Gemini API returned HTTP %d after %d ms: %s",
                response.status_code, latency_ms, message,
            )
            raise LLMHTTPError(
                message,
                status_code=response.status_code,
                provider=self.provider_name,
            )

        try:
            payload = response.json()
        except ValueError:
            logger.warning("Gemini API returned a non-JSON body (HTTP %d)", response.status_code)
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        feedback = payload.get("promptFeedback")
        return LLMResponse(
            raw_text=collect_candidate_text(payload),
            prompt_feedback=feedback if isinstance(feedback, dict) else None,
            model=cfg.model,
            provider=self.provider_name,
            latency_ms=latency_ms,
            prompt_hash=prompt_hash,
        )
