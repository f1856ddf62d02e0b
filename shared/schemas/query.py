"""Query schemas.

Field names on the wire are camelCase; Python code uses snake_case.
Every request field is optional here so that missing values reach the
query handler and are reported as ``400 {"message": ...}``.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class QueryBody(BaseModel):
    """Question about a previously extracted document."""

    model_config = ConfigDict(populate_by_name=True)

    document_data: Any = Field(default=None, alias="documentData")
    user_query: Optional[str] = Field(default=None, alias="userQuery")
    content_type: Optional[str] = Field(default=None, alias="contentType")
    api_key: Optional[str] = Field(default=None, alias="apiKey", repr=False)


class QueryAnswer(BaseModel):
    answer: str
