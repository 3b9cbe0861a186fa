"""Translate adapter errors into HTTP errors."""

from fastapi import HTTPException

from llm_adapters.errors import (
    AdapterError,
    InvalidConfigurationError,
    InvalidInputError,
    ParseError,
    TransportError,
)


def to_http_exception(exc: AdapterError) -> HTTPException:
    if isinstance(exc, (InvalidConfigurationError, InvalidInputError)):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, TransportError):
        return HTTPException(status_code=502, detail="Upstream service call failed")
    if isinstance(exc, ParseError):
        return HTTPException(status_code=502, detail="Upstream service returned an unexpected response")
    return HTTPException(status_code=500, detail="An internal error occurred.")
