"""Shared async HTTP client with timeouts and graceful shutdown."""

import httpx

from llm_adapters.config.logging import get_logger
from llm_adapters.config.settings import get_settings

logger = get_logger(__name__)

_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    """Return the shared async HTTP client. Creates it on first use."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = httpx.AsyncClient(
            timeout=settings.wikipedia_timeout_seconds,
            headers={"User-Agent": settings.wikipedia_user_agent},
            follow_redirects=True,
        )
        logger.info(
            "HTTP async client initialized",
            extra={"timeout": settings.wikipedia_timeout_seconds},
        )
    return _client


async def close_http_client() -> None:
    """Close the HTTP client and release connections. Call on app shutdown."""
    global _client
    if _client is not None:
        try:
            await _client.aclose()
            logger.info("HTTP async client closed")
        except Exception as e:
            logger.warning("Error closing HTTP client", extra={"error": str(e)})
        _client = None
