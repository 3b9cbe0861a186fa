"""FastAPI app entry: config, logging, health, and graceful shutdown."""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from llm_adapters.config.logging import configure_logging, get_logger
from llm_adapters.config.settings import get_settings
from llm_adapters.controllers.routes.llm import router as llm_router
from llm_adapters.controllers.routes.tools import router as tools_router
from llm_adapters.resources.http.client import close_http_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: config and logging. Shutdown: close the shared HTTP client."""
    settings = get_settings()
    configure_logging()
    logger.info("Application starting", extra={"app_name": settings.app_name, "environment": settings.environment})
    yield
    logger.info("Application shutting down")
    await close_http_client()
    logger.info("Shutdown complete")


app = FastAPI(
    title="LLM Adapters",
    description="Bedrock text generation and Wikipedia search for LLM chains and agents",
    version="0.1.0",
    debug=get_settings().debug,
    lifespan=lifespan,
)
app.include_router(llm_router)
app.include_router(tools_router)


@app.get("/health")
async def health() -> dict[str, Any]:
    """Liveness: service is up. Does not check dependencies."""
    return {"status": "ok"}


@app.exception_handler(Exception)
async def global_exception_handler(_request: Request, exc: Exception):
    """Centralized error handling: never leak stack traces or internal details to the client."""
    logger.exception("Unhandled error", extra={"error": type(exc).__name__})
    return JSONResponse(
        content={"detail": "An internal error occurred."},
        status_code=500,
    )
