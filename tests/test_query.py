"""Tests for core.query -- validation, answer interpretation, error mapping."""

import logging

import pytest

from core.providers import (
    LLMHTTPError,
    LLMRequestSetupError,
    LLMResponse,
    LLMUnreachableError,
)
from core.query import (
    MISSING_FIELD_MESSAGE,
    NO_ANSWER_MESSAGE,
    QueryError,
    QueryErrorKind,
    QueryRequest,
    handle_query,
    interpret_response,
)
from src.ingest.base import ContentType
from tests.fakes import FakeProvider


def _request(**overrides):
    values = {
        "document": "The sky is blue.",
        "question": "What colour is the sky?",
        "content_type": ContentType.TEXT,
        "credential": "k",
    }
    values.update(overrides)
    return QueryRequest(**values)


class TestMissingFields:

    @pytest.mark.parametrize(
        "overrides",
        [
            {"document": None},
            {"document": ""},
            {"document": {}},
            {"question": ""},
            {"question": "   "},
            {"credential": ""},
        ],
    )
    def test_rejected_without_provider_call(self, overrides, fake_provider):
        with pytest.raises(QueryError) as exc_info:
            handle_query(_request(**overrides), fake_provider)
        assert exc_info.value.kind is QueryErrorKind.MISSING_FIELD
        assert exc_info.value.message == MISSING_FIELD_MESSAGE
        assert exc_info.value.status_code == 400
        assert not fake_provider.invoked


class TestAnswers:

    def test_trimmed_text(self, fake_provider):
        assert handle_query(_request(), fake_provider) == "fake answer"

    def test_prompt_and_key_passed(self, fake_provider):
        handle_query(_request(), fake_provider)
        call = fake_provider.calls[0]
        assert "The sky is blue." in call["prompt"]
        assert "USER QUESTION: What colour is the sky?" in call["prompt"]
        assert call["api_key"] == "k"

    def test_structured_document(self, fake_provider):
        handle_query(
            _request(document={"Sheet1": [["a"]]}, content_type=ContentType.STRUCTURED),
            fake_provider,
        )
        assert '"Sheet1"' in fake_provider.calls[0]["prompt"]

    def test_safety_feedback_is_an_answer(self):
        provider = FakeProvider(LLMResponse(prompt_feedback={"blockReason": "SAFETY"}))
        answer = handle_query(_request(), provider)
        assert answer == 'LLM Safety Feedback: {"blockReason":"SAFETY"}'

    def test_text_wins_over_feedback(self):
        assert interpret_response("yes", {"blockReason": "OTHER"}) == "yes"

    def test_fallback(self):
        provider = FakeProvider(LLMResponse(raw_text="   "))
        assert handle_query(_request(), provider) == NO_ANSWER_MESSAGE

    def test_call_audit_logged(self, caplog):
        provider = FakeProvider(LLMResponse(
            raw_text="ok", model="gemini-x", provider="google", latency_ms=12, prompt_hash="abc123",
        ))
        with caplog.at_level(logging.INFO, logger="core.query"):
            handle_query(_request(), provider)
        assert "provider=google model=gemini-x latency_ms=12 prompt=abc123" in caplog.text

    def test_credential_not_in_repr(self):
        assert "secret-key" not in repr(_request(credential="secret-key"))


class TestProviderErrors:

    def test_http_error(self):
        provider = FakeProvider(exc=LLMHTTPError("quota exceeded", status_code=429))
        with pytest.raises(QueryError) as exc_info:
            handle_query(_request(), provider)
        err = exc_info.value
        assert err.kind is QueryErrorKind.PROVIDER_HTTP_ERROR
        assert err.message == "Gemini API Error (429): quota exceeded"
        assert err.provider_status == 429
        assert err.status_code == 500

    def test_unreachable(self):
        provider = FakeProvider(exc=LLMUnreachableError("No response received from API server."))
        with pytest.raises(QueryError) as exc_info:
            handle_query(_request(), provider)
        assert exc_info.value.kind is QueryErrorKind.PROVIDER_UNREACHABLE
        assert exc_info.value.message == "Gemini API Error: No response received from API server."
        assert exc_info.value.status_code == 500

    def test_setup_error(self):
        provider = FakeProvider(exc=LLMRequestSetupError("Invalid URL"))
        with pytest.raises(QueryError) as exc_info:
            handle_query(_request(), provider)
        assert exc_info.value.kind is QueryErrorKind.REQUEST_SETUP_ERROR
        assert exc_info.value.message == "Gemini API Error: Invalid URL"
        assert exc_info.value.provider_status is None
