"""
Wikipedia search tool backed by the MediaWiki Action API.

One request fetches both the search ranking and the intro extract of each hit
(generator=search + prop=extracts). Results are rendered as "Page:/Summary:" blocks.
"""

from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import BaseModel

from llm_adapters.config.logging import get_logger
from llm_adapters.config.wikipedia.models import DEFAULT_WIKIPEDIA_OPTIONS, WikipediaQueryOptions
from llm_adapters.errors import InvalidInputError, WikipediaRequestError, WikipediaResponseError
from llm_adapters.resources.http.client import get_http_client
from llm_adapters.services.tools.base import BaseTool

logger = get_logger(__name__)


class WikipediaPage(BaseModel):
    title: str
    summary: str


def parse_query_input(input: Any) -> str:
    """Accept a string or a mapping with a string "input" field; reject empty queries."""
    if isinstance(input, str):
        query = input
    elif isinstance(input, Mapping):
        query = input.get("input")
        if not isinstance(query, str):
            raise InvalidInputError("Invalid input format: expected a string 'input' field")
    else:
        raise InvalidInputError("Input must be a string or an object with an 'input' field")
    if not query.strip():
        raise InvalidInputError("Query cannot be empty")
    return query


def build_search_params(query: str, options: WikipediaQueryOptions) -> dict[str, str]:
    """Query-string parameters for a search-with-extracts request. Independent of language."""
    return {
        "action": "query",
        "format": "json",
        "formatversion": "2",
        "generator": "search",
        "gsrsearch": query,
        "gsrlimit": str(options.top_k_results),
        "prop": "extracts",
        "exintro": "1",
        "explaintext": "1",
        "exlimit": "max",
    }


def extract_pages(payload: Any, options: WikipediaQueryOptions) -> list[WikipediaPage]:
    """
    Rank pages by search index, keep the first top_k_results and cut each summary to
    max_doc_content_length characters. A payload without a query block has no hits.
    """
    if not isinstance(payload, dict):
        raise WikipediaResponseError("MediaWiki response is not a JSON object")
    if "error" in payload:
        info = payload["error"].get("info") if isinstance(payload["error"], dict) else payload["error"]
        raise WikipediaResponseError(f"MediaWiki error: {info}")

    query = payload.get("query")
    if query is None:
        return []
    pages = query.get("pages") if isinstance(query, dict) else None
    # formatversion=2 returns a list; the legacy format keys pages by id
    if isinstance(pages, dict):
        pages = list(pages.values())
    if not isinstance(pages, list):
        raise WikipediaResponseError("MediaWiki response has no query.pages")

    ranked: list[tuple[int, WikipediaPage]] = []
    for position, page in enumerate(pages):
        if not isinstance(page, dict) or not isinstance(page.get("title"), str):
            raise WikipediaResponseError("MediaWiki page entry has no title")
        index = page.get("index", position)
        if not isinstance(index, int) or isinstance(index, bool):
            raise WikipediaResponseError(f"MediaWiki page {page['title']!r} has a non-integer index")
        extract = page.get("extract") or ""
        summary = extract[: options.max_doc_content_length]
        ranked.append((index, WikipediaPage(title=page["title"], summary=summary)))
    ranked.sort(key=lambda pair: pair[0])
    return [page for _, page in ranked[: options.top_k_results]]


def format_pages(pages: list[WikipediaPage]) -> str:
    return "\n\n".join(f"Page: {p.title}\nSummary: {p.summary}" for p in pages)


class WikipediaQuery(BaseTool):
    """
    Searches Wikipedia and returns summaries of the top matching articles. Useful for
    general questions about people, places, companies, facts, and historical events.
    """

    def __init__(
        self,
        options: WikipediaQueryOptions | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.options = options or DEFAULT_WIKIPEDIA_OPTIONS
        self._client = client

    @property
    def name(self) -> str:
        return "wikipedia-api"

    @property
    def description(self) -> str:
        return (
            "A wrapper around Wikipedia. "
            "Useful for when you need to answer general questions about "
            "people, places, companies, facts, historical events, or other subjects. "
            "Input should be a search query."
        )

    @property
    def api_url(self) -> str:
        return self.options.api_url

    def with_lang(self, lang: str) -> "WikipediaQuery":
        return WikipediaQuery(self.options.with_lang(lang), client=self._client)

    def with_top_k_results(self, top_k: int) -> "WikipediaQuery":
        return WikipediaQuery(self.options.with_top_k_results(top_k), client=self._client)

    def with_max_doc_content_length(self, max_len: int) -> "WikipediaQuery":
        return WikipediaQuery(self.options.with_max_doc_content_length(max_len), client=self._client)

    async def search(self, query: str) -> list[WikipediaPage]:
        """Run one search-with-extracts request and return ranked, truncated pages."""
        client = self._client or get_http_client()
        try:
            response = await client.get(self.api_url, params=build_search_params(query, self.options))
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Wikipedia request failed", extra={"lang": self.options.lang, "error": str(e)})
            raise WikipediaRequestError(f"Wikipedia request failed: {e}") from e
        try:
            payload = response.json()
        except ValueError as e:
            raise WikipediaResponseError(f"Wikipedia response is not JSON: {e}") from e
        return extract_pages(payload, self.options)

    async def run(self, input: Any) -> str:
        query = parse_query_input(input)
        pages = await self.search(query)
        if not pages:
            return f"No results found for query: {query}"
        logger.info("Wikipedia query served", extra={"lang": self.options.lang, "pages": len(pages)})
        return format_pages(pages)
