"""PDF text extraction.

Extraction priority:
  1. pdfplumber -- primary backend
  2. PyPDF2     -- fallback when pdfplumber cannot open the document

Text from all pages is concatenated into a single string, pages
separated by a blank line.  When neither backend can read the bytes an
:class:`~src.ingest.base.ExtractionError` with reason ``unparsable-pdf``
is raised.
"""
from __future__ import annotations

import io
import logging
from typing import List

import pdfplumber
import PyPDF2

from .base import ExtractionError

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


def _extract_with_pdfplumber(data: bytes) -> str:
    pages: List[str] = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for idx, pdf_page in enumerate(pdf.pages):
            try:
                text = pdf_page.extract_text() or ""
            except Exception as exc:
                # a failed page contributes empty text
                logger.warning(
                    "pdfplumber: failed to extract text from page %d: %s",
                    idx + 1, exc,
                )
                text = ""
            pages.append(text)
    return PAGE_SEPARATOR.join(pages)


def _extract_with_pypdf2(data: bytes) -> str:
    reader = PyPDF2.PdfReader(io.BytesIO(data))
    pages: List[str] = []
    for idx, pdf_page in enumerate(reader.pages):
        try:
            text = pdf_page.extract_text() or ""
        except Exception as exc:
            logger.warning(
                "PyPDF2: failed to extract text from page %d: %s",
                idx + 1, exc,
            )
            text = ""
        pages.append(text)
    return PAGE_SEPARATOR.join(pages)


_BACKENDS = (
    ("pdfplumber", _extract_with_pdfplumber),
    ("PyPDF2", _extract_with_pypdf2),
)


def extract_pdf_text(data: bytes) -> str:
    """Return all recognised text of a PDF document.

    Parameters
    ----------
    data : bytes
        Raw PDF bytes.  Never modified.

    Returns
    -------
    str
        Concatenated page text (may be empty for image-only PDFs).

    Raises
    ------
    ExtractionError
        ``reason="unparsable-pdf"`` if no backend can parse the bytes.
    """
    errors: List[str] = []
    for name, extract_fn in _BACKENDS:
        try:
            text = extract_fn(data)
        except Exception as exc:
            logger.warning("PDF extraction with %s failed: %s", name, exc)
            errors.append(f"{name}: {exc}")
            continue
        logger.info("%s: extracted %d chars", name, len(text))
        return text

    raise ExtractionError(
        "unparsable-pdf",
        "could not parse the PDF document (" + "; ".join(errors) + ")",
    )
