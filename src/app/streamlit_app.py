"""
Document Q&A -- single-screen client (Streamlit UI)
===================================================

1. Enter a Gemini API key (used for this browser session only).
2. Upload a PDF, XLSX or XLS document.
3. Ask questions about it.

All state lives in one :class:`~src.app.session.SessionState` kept in
``st.session_state``; the backend stays stateless.

Run with::

    streamlit run src/app/streamlit_app.py
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path (needed when launched via `streamlit run`)
_PROJECT_ROOT = str(Path(__file__).resolve().parent.parent.parent)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

import streamlit as st

# ---------------------------------------------------------------------------
# Project imports
# ---------------------------------------------------------------------------

from src.app.backend_client import BackendClient, BackendError, NO_API_KEY_MESSAGE
from src.app.session import SessionState
from src.config.settings import get_settings
from src.ingest.base import ContentType

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ALLOWED_DOC_EXTENSIONS = ["pdf", "xlsx", "xls"]
PREVIEW_CHARS = 2000


# ---------------------------------------------------------------------------
# Session-state initialisation
# ---------------------------------------------------------------------------

def _init_session_state() -> None:
    """Ensure every required session-state key exists."""
    defaults = {
        "session": SessionState(),
        "upload_status": "Idle",
        "upload_error": "",
        "query_error": "",
        "uploader_nonce": 0,
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


def _state() -> SessionState:
    return st.session_state["session"]


def _set_state(state: SessionState) -> None:
    st.session_state["session"] = state


def _client() -> BackendClient:
    return BackendClient(get_settings().backend_url)


def _uploader_key() -> str:
    return f"file_input_{st.session_state['uploader_nonce']}"


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _on_file_change() -> None:
    uploaded = st.session_state.get(_uploader_key())
    st.session_state["upload_error"] = ""
    st.session_state["query_error"] = ""
    if uploaded is None:
        _set_state(_state().with_file(""))
        st.session_state["upload_status"] = "Idle"
        return
    _set_state(_state().with_file(uploaded.name))
    st.session_state["upload_status"] = "Ready to upload"


def _handle_upload(uploaded) -> None:
    st.session_state["upload_error"] = ""
    st.session_state["query_error"] = ""
    _set_state(_state().with_file(uploaded.name))
    try:
        with st.spinner("Uploading..."):
            doc = _client().upload(uploaded.name, uploaded.getvalue(), uploaded.type or None)
    except BackendError as exc:
        st.session_state["upload_error"] = f"Upload failed: {exc}"
        st.session_state["upload_status"] = "Upload failed"
        return
    _set_state(_state().with_upload(doc.filename, doc.content_type, doc.extracted_data))
    st.session_state["upload_status"] = "File uploaded and processed successfully!"


def _handle_query(question: str) -> None:
    st.session_state["query_error"] = ""
    state = _state().with_question(question).with_answer(None)
    _set_state(state)
    try:
        with st.spinner("Waiting for response from LLM..."):
            answer = _client().query(state)
    except BackendError as exc:
        st.session_state["query_error"] = f"Query failed: {exc}"
        return
    _set_state(_state().with_answer(answer))


def _handle_clear_all() -> None:
    """Reset document, question and answer; the entered key is kept."""
    credential = _state().credential
    _set_state(_state().cleared().with_credential(credential or ""))
    st.session_state["upload_status"] = "Idle"
    st.session_state["upload_error"] = ""
    st.session_state["query_error"] = ""
    # a new widget key resets the file picker
    st.session_state["uploader_nonce"] += 1


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _render_api_key_gate() -> None:
    st.header("Enter API Key")
    st.markdown(
        "Please enter your Gemini API key to proceed. "
        "The key will only be used for this session."
    )
    key_input = st.text_input("Gemini API Key", type="password", key="api_key_input")
    if st.button("Submit Key & Start", key="btn_api_key"):
        if not key_input.strip():
            st.session_state["upload_error"] = NO_API_KEY_MESSAGE
        else:
            _set_state(_state().with_credential(key_input))
            st.session_state["upload_error"] = ""
        st.rerun()
    if st.session_state["upload_error"]:
        st.error(st.session_state["upload_error"])


def _render_document_preview(state: SessionState) -> None:
    with st.expander("Extracted content", expanded=False):
        if state.content_type is ContentType.STRUCTURED:
            st.code(json.dumps(state.document, indent=2, ensure_ascii=False)[:PREVIEW_CHARS], language="json")
        else:
            st.text(str(state.document)[:PREVIEW_CHARS])


def _render_upload_section() -> None:
    st.subheader("1. Upload Document (.pdf, .xlsx, .xls)")
    uploaded = st.file_uploader(
        "Document",
        type=ALLOWED_DOC_EXTENSIONS,
        key=_uploader_key(),
        on_change=_on_file_change,
    )
    if st.button("Upload", key="btn_upload", disabled=uploaded is None):
        _handle_upload(uploaded)

    status = st.session_state["upload_status"]
    if st.session_state["upload_error"]:
        st.error(st.session_state["upload_error"])
    elif status != "Idle":
        st.caption(status)

    state = _state()
    if state.has_document:
        _render_document_preview(state)


def _render_query_section() -> None:
    st.subheader("2. Ask a Question")
    state = _state()
    if not state.has_document:
        st.markdown("_Upload and process a document first._")
    else:
        question = st.text_area(
            "Question",
            value=state.question,
            placeholder="Enter your question about the document here...",
            key="question_input",
        )
        if st.button("Submit Question", key="btn_query", disabled=not question.strip()):
            _handle_query(question)
    if st.session_state["query_error"]:
        st.error(st.session_state["query_error"])


def _render_answer_section() -> None:
    st.subheader("3. LLM Response")
    state = _state()
    if state.answer:
        st.markdown(state.answer)
    elif not st.session_state["query_error"]:
        st.markdown("_Response will appear here after asking a question._")


def main() -> None:
    st.set_page_config(page_title="Document Q&A", layout="centered")
    _init_session_state()

    if not _state().credential:
        _render_api_key_gate()
        return

    with st.sidebar:
        st.title("Document Q&A")
        state = _state()
        if state.filename:
            st.caption(f"File: {state.filename}")
        if state.content_type is not None:
            st.caption(f"Content: {state.content_type.media_type}")
        st.divider()
        if st.button("Clear All", key="btn_clear"):
            _handle_clear_all()
            st.rerun()

    st.title("Local Document Analysis with LLM")
    _render_upload_section()
    st.divider()
    _render_query_section()
    st.divider()
    _render_answer_section()


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
