"""Document upload schemas."""

from __future__ import annotations

from typing import Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""

    message: str


class UploadResponse(BaseModel):
    """Response after a document was uploaded and extracted."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    filename: str
    content_type: Literal["text/plain", "application/json"] = Field(alias="contentType")
    extracted_data: Union[str, Dict[str, List[List[str]]]] = Field(alias="extractedData")
