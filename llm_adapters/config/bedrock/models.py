"""Bedrock model identifiers and invocation configuration. Read-only; no business logic."""

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from llm_adapters.errors import InvalidConfigurationError, InvalidModelError


class ProviderFamily(str, Enum):
    """Closed set of request/response conventions understood by the formatter."""

    ANTHROPIC = "anthropic"
    AI21 = "ai21"
    AMAZON = "amazon"
    COHERE = "cohere"
    META = "meta"
    # Only reachable through an explicit provider on a custom model id
    GENERIC = "generic"


class BedrockModel(str, Enum):
    """Known Bedrock model identifiers. Any other string is accepted as a custom id."""

    ANTHROPIC_CLAUDE_V2 = "anthropic.claude-v2"
    ANTHROPIC_CLAUDE_INSTANT_V1 = "anthropic.claude-instant-v1"
    ANTHROPIC_CLAUDE_3_SONNET = "anthropic.claude-3-sonnet-20240229-v1:0"
    ANTHROPIC_CLAUDE_3_HAIKU = "anthropic.claude-3-haiku-20240307-v1:0"
    ANTHROPIC_CLAUDE_3_OPUS = "anthropic.claude-3-opus-20240229-v1:0"
    ANTHROPIC_CLAUDE_3_5_HAIKU = "anthropic.claude-3-5-haiku-20241022-v1:0"
    ANTHROPIC_CLAUDE_4_SONNET = "anthropic.claude-sonnet-4-20250514-v1:0"
    ANTHROPIC_CLAUDE_4_1_OPUS = "anthropic.claude-opus-4-1-20250805-v1:0"
    ANTHROPIC_CLAUDE_4_5_HAIKU = "anthropic.claude-haiku-4-5-20251001-v1:0"
    ANTHROPIC_CLAUDE_4_5_SONNET = "anthropic.claude-sonnet-4-5-20250929-v1:0"
    ANTHROPIC_CLAUDE_4_5_OPUS = "anthropic.claude-opus-4-5-20251101-v1:0"
    AI21_JURASSIC_2_MID = "ai21.j2-mid-v1"
    AI21_JURASSIC_2_ULTRA = "ai21.j2-ultra-v1"
    AMAZON_TITAN_TEXT_EXPRESS = "amazon.titan-text-express-v1"
    AMAZON_TITAN_TEXT_LITE = "amazon.titan-text-lite-v1"
    COHERE_COMMAND = "cohere.command-text-v14"
    COHERE_COMMAND_LIGHT = "cohere.command-light-text-v14"
    META_LLAMA_2_CHAT_13B = "meta.llama2-13b-chat-v1"
    META_LLAMA_2_CHAT_70B = "meta.llama2-70b-chat-v1"


# Cross-region inference profiles prefix the model id, e.g. "us.anthropic.claude-..."
_INFERENCE_PROFILE_PREFIXES = frozenset({"us", "eu", "apac", "us-gov", "jp", "au", "ca", "global"})

_CONVERSE_ONLY = re.compile(r"claude-(3|(sonnet|opus|haiku)-4)")


def resolve_provider(model_id: str, provider: ProviderFamily | None = None) -> ProviderFamily:
    """
    Resolve the provider family for a model id. An explicit provider wins; otherwise the
    vendor prefix decides. Raises InvalidModelError for empty, malformed, or unknown ids.
    """
    model_id = model_id.strip()
    if not model_id:
        raise InvalidModelError("Model identifier is empty")
    if provider is not None:
        return provider
    vendor, sep, rest = model_id.partition(".")
    if sep and vendor in _INFERENCE_PROFILE_PREFIXES:
        vendor, sep, rest = rest.partition(".")
    if not sep or not vendor or not rest:
        raise InvalidModelError(f"Malformed model identifier: {model_id!r}")
    if vendor == ProviderFamily.GENERIC.value:
        raise InvalidModelError(f"Unsupported model provider: {vendor!r}")
    try:
        return ProviderFamily(vendor)
    except ValueError:
        raise InvalidModelError(
            f"Unsupported model provider: {vendor!r} (declare a provider for custom model ids)"
        ) from None


def requires_converse_api(model_id: str) -> bool:
    """Claude 3 and later only accept the Converse (messages) API, not text completions."""
    return bool(_CONVERSE_ONLY.search(model_id))


class BedrockConfig(BaseModel):
    """
    Immutable Bedrock invocation options. Build variations with the with_* methods; each
    returns a new validated config and leaves the receiver untouched.
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model: str = Field(default=BedrockModel.ANTHROPIC_CLAUDE_3_SONNET.value, description="Model id")
    provider: ProviderFamily | None = Field(
        default=None, description="Explicit provider family for custom model ids"
    )
    region: str | None = Field(default="us-west-2", description="AWS region; None falls back to settings")
    temperature: float | None = Field(default=0.7, ge=0.0, le=5.0)
    max_tokens: int = Field(default=512, ge=1)
    top_p: float | None = Field(default=None, ge=0.0, le=1.0)
    top_k: int | None = Field(default=None, ge=1)
    stop_sequences: tuple[str, ...] = Field(default=())
    model_kwargs: dict[str, Any] = Field(
        default_factory=dict, description="Extra provider-specific body fields"
    )

    @field_validator("model", mode="before")
    @classmethod
    def _unwrap_enum(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value

    @property
    def provider_family(self) -> ProviderFamily:
        return resolve_provider(self.model, self.provider)

    @property
    def uses_converse_api(self) -> bool:
        return requires_converse_api(self.model)

    def _with(self, **changes: Any) -> "BedrockConfig":
        try:
            return self.model_validate({**self.model_dump(), **changes})
        except ValidationError as e:
            raise InvalidConfigurationError(str(e)) from e

    def with_model(self, model: BedrockModel | str, provider: ProviderFamily | None = None) -> "BedrockConfig":
        return self._with(model=model, provider=provider)

    def with_provider(self, provider: ProviderFamily | None) -> "BedrockConfig":
        return self._with(provider=provider)

    def with_region(self, region: str | None) -> "BedrockConfig":
        return self._with(region=region)

    def with_temperature(self, temperature: float) -> "BedrockConfig":
        return self._with(temperature=temperature)

    def with_max_tokens(self, max_tokens: int) -> "BedrockConfig":
        return self._with(max_tokens=max_tokens)

    def with_top_p(self, top_p: float) -> "BedrockConfig":
        return self._with(top_p=top_p)

    def with_top_k(self, top_k: int) -> "BedrockConfig":
        return self._with(top_k=top_k)

    def with_stop_sequence(self, stop: str) -> "BedrockConfig":
        """Append one stop sequence, keeping insertion order."""
        return self._with(stop_sequences=(*self.stop_sequences, stop))

    def with_model_kwargs(self, model_kwargs: dict[str, Any]) -> "BedrockConfig":
        return self._with(model_kwargs=dict(model_kwargs))


DEFAULT_BEDROCK_CONFIG = BedrockConfig()
