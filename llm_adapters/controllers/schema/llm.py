"""Request/response schemas for the /llm routes."""

from typing import Any

from pydantic import BaseModel, Field

from llm_adapters.config.bedrock.models import ProviderFamily


class BedrockOverrides(BaseModel):
    """Optional per-request overrides applied on top of the default Bedrock config."""

    model: str | None = Field(default=None, description="Known or custom Bedrock model id")
    provider: ProviderFamily | None = Field(default=None, description="Provider family for custom ids")
    region: str | None = Field(default=None)
    temperature: float | None = Field(default=None)
    max_tokens: int | None = Field(default=None)
    top_p: float | None = Field(default=None)
    top_k: int | None = Field(default=None)
    stop_sequences: list[str] = Field(default_factory=list)
    model_kwargs: dict[str, Any] | None = Field(default=None)


class InvokeRequest(BaseModel):
    prompt: str = Field(..., min_length=1, description="Prompt text")
    config: BedrockOverrides | None = None


class InvokeResponse(BaseModel):
    text: str


class BatchRequest(BaseModel):
    prompts: list[str] = Field(..., min_length=1, max_length=100, description="Prompts, answered in order")
    config: BedrockOverrides | None = None


class BatchResponse(BaseModel):
    generations: list[str] = Field(default_factory=list)
