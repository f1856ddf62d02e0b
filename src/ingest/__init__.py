"""Document extraction module -- normalise PDF and spreadsheet files.

Public API
----------
.. autofunction:: extract
.. autofunction:: extract_file
.. autoclass:: ExtractedContent
.. autoclass:: ContentType
"""
from .base import ContentType, ExtractedContent, ExtractionError, TableSet
from .reader import extract, extract_file

__all__ = [
    "extract",
    "extract_file",
    "ContentType",
    "ExtractedContent",
    "ExtractionError",
    "TableSet",
]
