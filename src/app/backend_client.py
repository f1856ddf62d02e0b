"""HTTP client for the Document Q&A API, used by the Streamlit UI."""
from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass
from typing import Any, Optional

import requests

from src.ingest.base import ContentType

from .session import SessionState

logger = logging.getLogger(__name__)

UPLOAD_UNREACHABLE_MESSAGE = "Could not connect to the backend server. Is it running?"
QUERY_UNREACHABLE_MESSAGE = "Could not connect to the backend server for query."
NO_QUESTION_MESSAGE = "Please enter a question."
NO_DOCUMENT_MESSAGE = "No document data available. Upload a file first."
NO_API_KEY_MESSAGE = "Please enter an API key."

_EXTRA_MEDIA_TYPES = {
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
    ".pdf": "application/pdf",
}


class BackendError(Exception):
    """Raised when an upload or query does not produce a result."""


@dataclass(frozen=True)
class UploadedDocument:
    filename: str
    content_type: ContentType
    extracted_data: Any


def guess_media_type(filename: str) -> str:
    """Media type a browser would declare for *filename*."""
    lowered = filename.lower()
    for suffix, media_type in _EXTRA_MEDIA_TYPES.items():
        if lowered.endswith(suffix):
            return media_type
    return mimetypes.guess_type(filename)[0] or "application/octet-stream"


def _error_text(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return str(body)


class BackendClient:
    """Thin wrapper over ``POST /upload`` and ``POST /query``."""

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self.timeout = timeout

    def upload(self, filename: str, data: bytes, media_type: Optional[str] = None) -> UploadedDocument:
        """Send one file and return its extracted content."""
        media_type = media_type or guess_media_type(filename)
        logger.info("Sending %s to backend (%d bytes)", filename, len(data))
        try:
            response = self._session.post(
                f"{self.base_url}/upload",
                files={"file": (filename, data, media_type)},
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise BackendError(UPLOAD_UNREACHABLE_MESSAGE) from exc
        except requests.RequestException as exc:
            raise BackendError(str(exc)) from exc

        if response.status_code != 200:
            raise BackendError(_error_text(response))

        body = response.json()
        return UploadedDocument(
            filename=body.get("filename", filename),
            content_type=ContentType.from_media_type(body.get("contentType")),
            extracted_data=body.get("extractedData"),
        )

    def query(self, state: SessionState) -> str:
        """Ask the question held in *state* about its document."""
        if not state.question.strip():
            raise BackendError(NO_QUESTION_MESSAGE)
        if not state.has_document:
            raise BackendError(NO_DOCUMENT_MESSAGE)
        if not state.credential:
            raise BackendError(NO_API_KEY_MESSAGE)

        try:
            response = self._session.post(
                f"{self.base_url}/query",
                json=state.query_payload(),
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout):
            raise BackendError(QUERY_UNREACHABLE_MESSAGE) from None
        except requests.RequestException as exc:
            # the request body carries the API key, keep the message generic
            raise BackendError(type(exc).__name__) from None

        if response.status_code != 200:
            raise BackendError(_error_text(response))
        return response.json().get("answer", "")
