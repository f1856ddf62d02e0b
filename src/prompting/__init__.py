"""Prompt construction for document question answering."""

from .prompts import ANSWER_CUE, PROMPT_TEMPLATE, build_prompt, serialize_content

__all__ = [
    "ANSWER_CUE",
    "PROMPT_TEMPLATE",
    "build_prompt",
    "serialize_content",
]
