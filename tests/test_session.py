"""Tests for src.app.session -- client-held session state transitions."""

from src.app.session import SessionState
from src.ingest.base import ContentType

TABLES = {"Sheet1": [["a", "b"], ["1", "2"]]}


def _loaded():
    return (
        SessionState()
        .with_credential("key-1")
        .with_file("book.xlsx")
        .with_upload("book.xlsx", ContentType.STRUCTURED, TABLES)
    )


class TestTransitions:
    def test_initial_state(self):
        s = SessionState()
        assert s.document is None
        assert s.credential is None
        assert not s.has_document
        assert not s.ready_for_query()

    def test_blank_credential_is_unset(self):
        assert SessionState().with_credential("   ").credential is None

    def test_upload_sets_document(self):
        s = _loaded()
        assert s.has_document
        assert s.content_type is ContentType.STRUCTURED
        assert s.filename == "book.xlsx"
        assert s.answer is None

    def test_new_file_clears_document_and_answer(self):
        s = _loaded().with_question("q").with_answer("a").with_file("other.pdf")
        assert s.document is None
        assert s.content_type is None
        assert s.question == ""
        assert s.answer is None
        assert s.filename == "other.pdf"
        assert s.credential == "key-1"

    def test_reupload_clears_answer_keeps_question(self):
        s = _loaded().with_question("q").with_answer("a")
        s = s.with_upload("book.xlsx", ContentType.STRUCTURED, {"Sheet1": [["z"]]})
        assert s.answer is None
        assert s.question == "q"

    def test_cleared_resets_everything(self):
        assert _loaded().with_question("q").cleared() == SessionState()

    def test_immutable(self):
        s = SessionState()
        s.with_question("q")
        assert s.question == ""


class TestQueryPayload:
    def test_ready_for_query(self):
        assert _loaded().with_question("Sum of b?").ready_for_query()
        assert not _loaded().with_question("  ").ready_for_query()

    def test_payload_fields(self):
        payload = _loaded().with_question("Sum of b?").query_payload()
        assert payload == {
            "documentData": TABLES,
            "userQuery": "Sum of b?",
            "contentType": "application/json",
            "apiKey": "key-1",
        }

    def test_text_payload_content_type(self):
        s = SessionState().with_upload("r.pdf", ContentType.TEXT, "hello")
        assert s.query_payload()["contentType"] == "text/plain"

    def test_credential_not_in_repr(self):
        assert "key-1" not in repr(_loaded())
