"""Base types for document extraction."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, List, Union

# sheet name -> rows -> cell strings
TableSet = Dict[str, List[List[str]]]


class ContentType(str, enum.Enum):
    """Two-valued tag carried alongside extracted content."""

    TEXT = "text"
    STRUCTURED = "structured"

    @property
    def media_type(self) -> str:
        """Wire spelling used by the HTTP API."""
        return _MEDIA_TYPES[self]

    @classmethod
    def from_media_type(cls, value: str | None) -> "ContentType":
        """Map a wire tag back to a ContentType.

        Anything other than ``application/json`` is treated as text.
        """
        if value in (cls.STRUCTURED.value, _MEDIA_TYPES[cls.STRUCTURED]):
            return cls.STRUCTURED
        return cls.TEXT


_MEDIA_TYPES = {
    ContentType.TEXT: "text/plain",
    ContentType.STRUCTURED: "application/json",
}


@dataclass(frozen=True)
class ExtractedContent:
    """Normalised content of one document.

    ``data`` is a ``str`` for text documents and a :data:`TableSet` for
    spreadsheets.  Build instances with :meth:`text` / :meth:`tables` so
    the tag always matches the payload.
    """

    content_type: ContentType
    data: Union[str, TableSet]

    @classmethod
    def text(cls, value: str) -> "ExtractedContent":
        return cls(ContentType.TEXT, value)

    @classmethod
    def tables(cls, sheets: TableSet) -> "ExtractedContent":
        return cls(ContentType.STRUCTURED, sheets)

    @property
    def is_structured(self) -> bool:
        return self.content_type is ContentType.STRUCTURED


class ExtractionError(Exception):
    """Raised when a file passed validation but its content cannot be parsed.

    ``reason`` is a stable machine-readable code
    (``unparsable-pdf``, ``unparsable-spreadsheet``, ``unsupported-extension``).
    """

    def __init__(self, reason: str, detail: str = ""):
        super().__init__(detail or reason)
        self.reason = reason
        self.detail = detail or reason
