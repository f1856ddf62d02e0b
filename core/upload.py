"""Upload handling: validate, store transiently, extract, clean up.

:func:`handle_upload` is framework-free; the HTTP router passes in the
file's name, declared media type and bytes, and converts
:class:`UploadError` into a ``{"message": ...}`` response.
"""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from typing import Optional, Union

from src.config.settings import AppSettings
from src.ingest import ContentType, ExtractionError, TableSet, extract_file

from .storage import delete_scratch_file, scratch_path, write_scratch_file

logger = logging.getLogger(__name__)

# Accepted extension -> the one media type paired with it.
ALLOWED_UPLOAD_TYPES = {
    ".pdf": "application/pdf",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
}

UPLOAD_FIELD_NAME = "file"

SUCCESS_MESSAGE = "File uploaded and processed successfully!"
NO_FILE_MESSAGE = "No file uploaded."
INVALID_TYPE_MESSAGE = "Invalid file type. Only PDF, XLSX, and XLS files are allowed."
UNEXPECTED_FIELD_MESSAGE = (
    f"Unexpected field: send exactly one file in the '{UPLOAD_FIELD_NAME}' field."
)


class UploadErrorKind(str, enum.Enum):
    INVALID_FILE = "InvalidFile"
    PROCESSING_FAILED = "ProcessingFailed"


class UploadError(Exception):
    """Upload rejected (400) or extraction failed (500)."""

    def __init__(self, kind: UploadErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return 400 if self.kind is UploadErrorKind.INVALID_FILE else 500


@dataclass(frozen=True)
class UploadResult:
    filename: str
    content_type: ContentType
    extracted_data: Union[str, TableSet]


def _format_size(num_bytes: int) -> str:
    mib = num_bytes / (1024 * 1024)
    return f"{mib:g} MB"


def validate_upload(
    filename: Optional[str],
    media_type: Optional[str],
    size: int,
    max_bytes: int,
) -> str:
    """Check extension, media type and size, in that order.

    Returns the lowercase extension of an accepted file.

    Raises
    ------
    UploadError
        ``InvalidFile`` with a human-readable reason.
    """
    if not filename:
        raise UploadError(UploadErrorKind.INVALID_FILE, NO_FILE_MESSAGE)

    extension = os.path.splitext(filename)[1].lower()
    declared = (media_type or "").split(";")[0].strip().lower()
    expected = ALLOWED_UPLOAD_TYPES.get(extension)

    is_extension_allowed = expected is not None
    is_media_type_allowed = is_extension_allowed and declared == expected
    if not (is_extension_allowed and is_media_type_allowed):
        logger.warning(
            "File rejected: Ext=%s(%s), Mime=%s(%s)",
            extension or "<none>", is_extension_allowed,
            declared or "<none>", is_media_type_allowed,
        )
        raise UploadError(UploadErrorKind.INVALID_FILE, INVALID_TYPE_MESSAGE)

    if size > max_bytes:
        logger.warning("File rejected: %s is %d bytes (limit %d)", filename, size, max_bytes)
        raise UploadError(
            UploadErrorKind.INVALID_FILE,
            f"File too large. Maximum upload size is {_format_size(max_bytes)}.",
        )

    return extension


def handle_upload(
    filename: Optional[str],
    media_type: Optional[str],
    content: bytes,
    settings: AppSettings,
) -> UploadResult:
    """Validate an upload, extract its content and delete the scratch copy.

    The scratch file is removed on every path, including a failed or
    partial write and unexpected exceptions raised during extraction.

    Raises
    ------
    UploadError
        ``InvalidFile`` before anything is written, or
        ``ProcessingFailed`` when storing or extracting the file fails.
    """
    validate_upload(filename, media_type, len(content), settings.max_upload_bytes)

    try:
        path = scratch_path(settings.upload_dir, filename)
    except ValueError as exc:
        raise UploadError(UploadErrorKind.INVALID_FILE, str(exc)) from exc

    try:
        write_scratch_file(settings.upload_dir, path.name, content)
        extracted = extract_file(path)
    except ExtractionError as exc:
        logger.error("Error parsing file %s: %s", path.name, exc.detail)
        raise UploadError(
            UploadErrorKind.PROCESSING_FAILED,
            f"Error processing file: {exc.detail}",
        ) from exc
    except OSError as exc:
        logger.error("Error storing file %s: %s", path.name, exc)
        raise UploadError(
            UploadErrorKind.PROCESSING_FAILED,
            f"Error processing file: could not store upload ({exc.strerror or exc})",
        ) from exc
    finally:
        delete_scratch_file(path)

    logger.info("%s parsed successfully (%s)", path.name, extracted.content_type.value)
    return UploadResult(
        filename=path.name,
        content_type=extracted.content_type,
        extracted_data=extracted.data,
    )
