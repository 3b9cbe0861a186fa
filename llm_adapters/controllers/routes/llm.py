"""POST /llm/invoke and /llm/batch: Bedrock text generation."""

from fastapi import APIRouter

from llm_adapters.config.settings import get_settings
from llm_adapters.controllers.routes.errors import to_http_exception
from llm_adapters.controllers.schema.llm import (
    BatchRequest,
    BatchResponse,
    BedrockOverrides,
    InvokeRequest,
    InvokeResponse,
)
from llm_adapters.errors import AdapterError
from llm_adapters.services.bedrock.llm import Bedrock

router = APIRouter(prefix="/llm", tags=["llm"])

# Shared across requests so the bedrock-runtime client is created once
_base = Bedrock()


def resolve_adapter(overrides: BedrockOverrides | None) -> Bedrock:
    """Apply request overrides to the base adapter. Raises InvalidConfigurationError."""
    bedrock = _base
    default_model = get_settings().bedrock_default_model
    if default_model and (overrides is None or overrides.model is None):
        bedrock = bedrock.with_model(default_model)
    if overrides is None:
        return bedrock
    if overrides.model is not None:
        bedrock = bedrock.with_model(overrides.model, overrides.provider)
    elif overrides.provider is not None:
        bedrock = bedrock.with_provider(overrides.provider)
    if overrides.region is not None:
        bedrock = bedrock.with_region(overrides.region)
    if overrides.temperature is not None:
        bedrock = bedrock.with_temperature(overrides.temperature)
    if overrides.max_tokens is not None:
        bedrock = bedrock.with_max_tokens(overrides.max_tokens)
    if overrides.top_p is not None:
        bedrock = bedrock.with_top_p(overrides.top_p)
    if overrides.top_k is not None:
        bedrock = bedrock.with_top_k(overrides.top_k)
    for stop in overrides.stop_sequences:
        bedrock = bedrock.with_stop_sequence(stop)
    if overrides.model_kwargs is not None:
        bedrock = bedrock.with_model_kwargs(overrides.model_kwargs)
    return bedrock


@router.post("/invoke", response_model=InvokeResponse)
async def invoke(body: InvokeRequest) -> InvokeResponse:
    """Generate text for one prompt."""
    try:
        text = await resolve_adapter(body.config).invoke(body.prompt)
    except AdapterError as e:
        raise to_http_exception(e) from e
    return InvokeResponse(text=text)


@router.post("/batch", response_model=BatchResponse)
async def batch(body: BatchRequest) -> BatchResponse:
    """Generate text for each prompt in order. Any failure fails the whole request."""
    try:
        generations = await resolve_adapter(body.config).batch_generate(body.prompts)
    except AdapterError as e:
        raise to_http_exception(e) from e
    return BatchResponse(generations=generations)
