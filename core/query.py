"""Query handling: validate, build the prompt, call the provider once.

Safety feedback from the provider is a successful outcome: the answer
text explains why nothing was generated.  :class:`QueryError` is
reserved for missing input and transport/provider failures.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from src.ingest import ContentType
from src.prompting import build_prompt

from .providers import (
    LLMConfig,
    LLMHTTPError,
    LLMProvider,
    LLMRequestSetupError,
    LLMUnreachableError,
)

logger = logging.getLogger(__name__)

MISSING_FIELD_MESSAGE = "Missing document data, user query, or API key."
NO_ANSWER_MESSAGE = "Could not extract answer from LLM response."
SAFETY_FEEDBACK_PREFIX = "LLM Safety Feedback: "
PROVIDER_LABEL = "Gemini API Error"


class QueryErrorKind(str, enum.Enum):
    MISSING_FIELD = "MissingField"
    PROVIDER_HTTP_ERROR = "ProviderHttpError"
    PROVIDER_UNREACHABLE = "ProviderUnreachable"
    REQUEST_SETUP_ERROR = "RequestSetupError"


class QueryError(Exception):
    """Query could not be answered.

    ``provider_status`` is the provider's HTTP status for
    ``ProviderHttpError`` and ``None`` otherwise.
    """

    def __init__(
        self,
        kind: QueryErrorKind,
        message: str,
        provider_status: Optional[int] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.provider_status = provider_status

    @property
    def status_code(self) -> int:
        return 400 if self.kind is QueryErrorKind.MISSING_FIELD else 500


@dataclass(frozen=True)
class QueryRequest:
    """One question about one document.  The credential is kept out of repr."""

    document: Any
    question: str
    content_type: ContentType = ContentType.TEXT
    credential: str = field(default="", repr=False)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Mapping):
        return len(value) == 0
    return False


def interpret_response(raw_text: Optional[str], prompt_feedback: Optional[dict]) -> str:
    """Turn a provider response into the answer shown to the user."""
    if raw_text and raw_text.strip():
        return raw_text.strip()
    if prompt_feedback is not None:
        logger.warning("Gemini API prompt feedback: %s", prompt_feedback)
        return SAFETY_FEEDBACK_PREFIX + json.dumps(
            prompt_feedback, separators=(",", ":"), ensure_ascii=False,
        )
    logger.warning("Gemini API response had neither candidate text nor prompt feedback")
    return NO_ANSWER_MESSAGE


def handle_query(
    request: QueryRequest,
    provider: LLMProvider,
    config: Optional[LLMConfig] = None,
) -> str:
    """Answer *request* with a single provider call.

    Returns
    -------
    str
        The trimmed answer, the serialised safety feedback, or
        :data:`NO_ANSWER_MESSAGE`.

    Raises
    ------
    QueryError
        ``MissingField`` before any network call, or one of the
        provider kinds when the call fails.
    """
    if (
        _is_blank(request.document)
        or _is_blank(request.question)
        or _is_blank(request.credential)
    ):
        raise QueryError(QueryErrorKind.MISSING_FIELD, MISSING_FIELD_MESSAGE)

    prompt = build_prompt(request.document, request.content_type, request.question)

    try:
        response = provider.generate(prompt, api_key=request.credential, config=config)
    except LLMHTTPError as exc:
        raise QueryError(
            QueryErrorKind.PROVIDER_HTTP_ERROR,
            f"{PROVIDER_LABEL} ({exc.status_code}): {exc.message}",
            provider_status=exc.status_code,
        ) from exc
    except LLMUnreachableError as exc:
        raise QueryError(
            QueryErrorKind.PROVIDER_UNREACHABLE,
            f"{PROVIDER_LABEL}: {exc.message}",
        ) from exc
    except LLMRequestSetupError as exc:
        raise QueryError(
            QueryErrorKind.REQUEST_SETUP_ERROR,
            f"{PROVIDER_LABEL}: {exc.message}",
        ) from exc

    logger.info(
        "LLM call: provider=%s model=%s latency_ms=%d prompt=%s",
        response.provider, response.model, response.latency_ms, response.prompt_hash,
    )
    return interpret_response(response.raw_text, response.prompt_feedback)
