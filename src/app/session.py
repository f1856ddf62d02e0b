"""Client-held session state.

One :class:`SessionState` value describes everything the client knows
between the upload and the query round trip.  It is immutable: every
user action produces a new value, and the whole value is re-sent to the
backend with each question.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from src.ingest.base import ContentType


@dataclass(frozen=True)
class SessionState:
    """Current document, question and answer for one user.

    Attributes:
        document:     Extracted content from the last successful upload.
        content_type: Tag of ``document``.
        filename:     Name of the uploaded (or selected) file.
        question:     The question being typed.
        answer:       Last answer received.
        credential:   User-supplied API key; never shown in repr.
    """

    document: Any = None
    content_type: Optional[ContentType] = None
    filename: str = ""
    question: str = ""
    answer: Optional[str] = None
    credential: Optional[str] = field(default=None, repr=False)

    # -- transitions ------------------------------------------------------

    def with_credential(self, credential: str) -> "SessionState":
        return replace(self, credential=credential.strip() or None)

    def with_file(self, filename: str) -> "SessionState":
        """A new file was picked: forget the previous document and its Q&A."""
        return replace(
            self,
            document=None,
            content_type=None,
            filename=filename,
            question="",
            answer=None,
        )

    def with_upload(self, filename: str, content_type: ContentType, document: Any) -> "SessionState":
        """Replace the document with freshly extracted content."""
        return replace(
            self,
            document=document,
            content_type=content_type,
            filename=filename,
            answer=None,
        )

    def with_question(self, question: str) -> "SessionState":
        return replace(self, question=question)

    def with_answer(self, answer: Optional[str]) -> "SessionState":
        return replace(self, answer=answer)

    def cleared(self) -> "SessionState":
        """Reset every field."""
        return SessionState()

    # -- queries ----------------------------------------------------------

    @property
    def has_document(self) -> bool:
        return self.document is not None and self.document != "" and self.document != {}

    def ready_for_query(self) -> bool:
        return self.has_document and bool(self.question.strip()) and bool(self.credential)

    def query_payload(self) -> Dict[str, Any]:
        """Request body for ``POST /query``."""
        content_type = self.content_type or ContentType.TEXT
        return {
            "documentData": self.document,
            "userQuery": self.question,
            "contentType": content_type.media_type,
            "apiKey": self.credential,
        }
