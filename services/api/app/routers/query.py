"""Question-answering endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from core.providers import LLMConfig, LLMProvider
from core.query import QueryRequest, handle_query
from shared.schemas import ErrorResponse, QueryAnswer, QueryBody
from src.ingest import ContentType

from ..deps import get_llm_config, get_provider

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/query",
    response_model=QueryAnswer,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def query_document(
    body: QueryBody,
    provider: LLMProvider = Depends(get_provider),
    config: LLMConfig = Depends(get_llm_config),
):
    """Answer a question about the document sent in the request body.

    Runs in the threadpool: the provider call blocks until the model answers.
    """
    request = QueryRequest(
        document=body.document_data,
        question=body.user_query or "",
        content_type=ContentType.from_media_type(body.content_type),
        credential=body.api_key or "",
    )
    answer = handle_query(request, provider, config=config)
    return QueryAnswer(answer=answer)
