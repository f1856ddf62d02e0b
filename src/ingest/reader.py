"""Main dispatcher for document extraction.

Picks a reader by file extension and returns normalised content.

Supported formats
-----------------
* **.pdf**  -- via :func:`~src.ingest.pdf_reader.extract_pdf_text` (text)
* **.xlsx** -- via :func:`~src.ingest.spreadsheet_reader.extract_workbook` (structured)
* **.xls**  -- via :func:`~src.ingest.spreadsheet_reader.extract_workbook` (structured)

Usage::

    from src.ingest.reader import extract

    content = extract(pdf_bytes, ".pdf")
    print(content.data)
"""
from __future__ import annotations

import logging
from pathlib import Path

from .base import ContentType, ExtractedContent, ExtractionError
from .pdf_reader import extract_pdf_text
from .spreadsheet_reader import extract_workbook

logger = logging.getLogger(__name__)

# Map lowercase suffixes (including the dot) to the content they produce.
_EXTENSION_MAP = {
    ".pdf": ContentType.TEXT,
    ".xlsx": ContentType.STRUCTURED,
    ".xls": ContentType.STRUCTURED,
}


def extract(data: bytes, extension: str) -> ExtractedContent:
    """Extract normalised content from raw file bytes.

    Parameters
    ----------
    data : bytes
        The file content.  Never modified.
    extension : str
        Declared file extension including the dot (case-insensitive).

    Returns
    -------
    ExtractedContent
        Text for PDFs, a table set for spreadsheets.

    Raises
    ------
    ExtractionError
        If the extension is not supported or the bytes cannot be parsed.
    """
    suffix = extension.lower()
    content_type = _EXTENSION_MAP.get(suffix)

    if content_type is None:
        supported = ", ".join(sorted(_EXTENSION_MAP.keys()))
        raise ExtractionError(
            "unsupported-extension",
            f"Unsupported file type '{suffix}'. Supported extensions: {supported}",
        )

    if content_type is ContentType.TEXT:
        logger.info("Parsing PDF (%d bytes)", len(data))
        return ExtractedContent.text(extract_pdf_text(data))

    logger.info("Parsing spreadsheet %s (%d bytes)", suffix, len(data))
    return ExtractedContent.tables(extract_workbook(data, suffix))


def extract_file(file_path: str | Path) -> ExtractedContent:
    """Read a stored file and extract it using its own suffix."""
    path = Path(file_path)
    return extract(path.read_bytes(), path.suffix)
