"""Pass-through format for custom models with no known provider convention."""

from typing import Any

from llm_adapters.config.bedrock.models import BedrockConfig, ProviderFamily
from llm_adapters.services.bedrock.base import BaseProviderFormat

# Checked in order; covers the text fields used across Bedrock providers
TEXT_FIELDS = ("completion", "generation", "outputText", "text", "output")


class GenericFormat(BaseProviderFormat):
    """
    Forwards the raw prompt and only the parameters that are set. Model-specific fields
    belong in model_kwargs.
    """

    max_temperature = None

    @property
    def family(self) -> ProviderFamily:
        return ProviderFamily.GENERIC

    def _body(self, prompt: str, config: BedrockConfig) -> dict[str, Any]:
        body: dict[str, Any] = {"prompt": prompt, "max_tokens": config.max_tokens}
        if config.temperature is not None:
            body["temperature"] = config.temperature
        if config.top_p is not None:
            body["top_p"] = config.top_p
        if config.top_k is not None:
            body["top_k"] = config.top_k
        if config.stop_sequences:
            body["stop_sequences"] = list(config.stop_sequences)
        return body

    def parse_body(self, payload: dict[str, Any]) -> str:
        for key in TEXT_FIELDS:
            value = payload.get(key)
            if isinstance(value, str):
                return value
        raise self._missing(" | ".join(TEXT_FIELDS))
