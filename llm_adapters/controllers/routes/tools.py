"""POST /tools/wikipedia: Wikipedia search tool."""

from fastapi import APIRouter

from llm_adapters.controllers.routes.errors import to_http_exception
from llm_adapters.controllers.schema.tools import ToolResponse, WikipediaRequest
from llm_adapters.errors import AdapterError
from llm_adapters.services.tools.wikipedia import WikipediaQuery

router = APIRouter(prefix="/tools", tags=["tools"])


@router.post("/wikipedia", response_model=ToolResponse)
async def wikipedia(body: WikipediaRequest) -> ToolResponse:
    """Search Wikipedia and return "Page:/Summary:" blocks for the top hits."""
    tool = WikipediaQuery()
    try:
        if body.lang is not None:
            tool = tool.with_lang(body.lang)
        if body.top_k_results is not None:
            tool = tool.with_top_k_results(body.top_k_results)
        if body.max_doc_content_length is not None:
            tool = tool.with_max_doc_content_length(body.max_doc_content_length)
        result = await tool.run(body.input)
    except AdapterError as e:
        raise to_http_exception(e) from e
    return ToolResponse(tool=tool.name, result=result)
