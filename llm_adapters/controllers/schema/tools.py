"""Request/response schemas for the /tools routes."""

from typing import Any

from pydantic import BaseModel, Field


class WikipediaRequest(BaseModel):
    """Input is a bare query string or an object with an "input" field."""

    input: str | dict[str, Any] = Field(..., description="Search query")
    top_k_results: int | None = Field(default=None)
    max_doc_content_length: int | None = Field(default=None)
    lang: str | None = Field(default=None, description="Wikipedia language code")


class ToolResponse(BaseModel):
    tool: str
    result: str
