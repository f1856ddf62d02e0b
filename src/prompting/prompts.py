"""Prompt template for document question answering.

The template is a module constant so it can be overridden without
touching request handling; :func:`build_prompt` accepts a ``template``
argument for the same purpose.
"""
from __future__ import annotations

import json
from typing import Any, Optional

from src.ingest.base import ContentType

# ------------------------------------------------------------------
# User prompt template  (the {variables} are filled at runtime)
# ------------------------------------------------------------------

PROMPT_TEMPLATE = """\
Analyze the following document content and answer the user's question.

DOCUMENT CONTENT:
---
{document_content}
---

USER QUESTION: {user_question}

ANSWER:"""

ANSWER_CUE = "ANSWER:"


def serialize_content(content: Any, content_type: ContentType) -> str:
    """Turn extracted content into the text placed in the prompt.

    Table sets become indented JSON (sheet and row order preserved).
    Text is used verbatim; a non-string document is always serialised
    as a table set, whatever its tag says.
    """
    if content_type is ContentType.STRUCTURED or not isinstance(content, str):
        return json.dumps(content, indent=2, ensure_ascii=False)
    return content


def build_prompt(
    content: Any,
    content_type: ContentType,
    question: str,
    template: Optional[str] = None,
) -> str:
    """Build the full prompt sent to the model.

    Parameters
    ----------
    content : str | dict
        Extracted document content.
    content_type : ContentType
        Tag that decides how *content* is serialised.
    question : str
        The user's question, inserted literally.
    template : str, optional
        Override for :data:`PROMPT_TEMPLATE`.  Must contain the
        ``{document_content}`` and ``{user_question}`` fields.

    Returns
    -------
    str
        Prompt ending with the ``ANSWER:`` cue.
    """
    prompt = (template or PROMPT_TEMPLATE).format(
        document_content=serialize_content(content, content_type),
        user_question=question,
    )
    if not prompt.rstrip().endswith(ANSWER_CUE):
        prompt = prompt.rstrip() + "\n\n" + ANSWER_CUE
    return prompt
