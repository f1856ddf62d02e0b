"""Document upload endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from core.upload import (
    NO_FILE_MESSAGE,
    SUCCESS_MESSAGE,
    UNEXPECTED_FIELD_MESSAGE,
    UPLOAD_FIELD_NAME,
    UploadError,
    UploadErrorKind,
    handle_upload,
)
from shared.schemas import ErrorResponse, UploadResponse
from src.config.settings import AppSettings

from ..deps import get_settings

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_document(
    request: Request,
    settings: AppSettings = Depends(get_settings),
):
    """Upload one PDF/XLSX/XLS file and return its extracted content."""
    form = await request.form()
    try:
        files = [
            (key, value) for key, value in form.multi_items()
            if isinstance(value, UploadFile)
        ]
        if any(key != UPLOAD_FIELD_NAME for key, _ in files) or len(files) > 1:
            raise UploadError(UploadErrorKind.INVALID_FILE, UNEXPECTED_FIELD_MESSAGE)
        if not files:
            raise UploadError(UploadErrorKind.INVALID_FILE, NO_FILE_MESSAGE)

        upload = files[0][1]
        # one byte past the limit is enough to know it is too large
        content = await upload.read(settings.max_upload_bytes + 1)
        result = await run_in_threadpool(
            handle_upload,
            upload.filename,
            upload.content_type,
            content,
            settings,
        )
    finally:
        await form.close()

    return UploadResponse(
        message=SUCCESS_MESSAGE,
        filename=result.filename,
        content_type=result.content_type.media_type,
        extracted_data=result.extracted_data,
    )
