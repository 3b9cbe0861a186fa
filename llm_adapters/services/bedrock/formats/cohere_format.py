"""Cohere Command format."""

from typing import Any

from llm_adapters.config.bedrock.models import BedrockConfig, ProviderFamily
from llm_adapters.services.bedrock.base import BaseProviderFormat, first_text


class CohereFormat(BaseProviderFormat):
    max_temperature = 5.0

    @property
    def family(self) -> ProviderFamily:
        return ProviderFamily.COHERE

    def _body(self, prompt: str, config: BedrockConfig) -> dict[str, Any]:
        return {
            "prompt": prompt,
            "max_tokens": config.max_tokens,
            "temperature": config.temperature if config.temperature is not None else 0.7,
            "p": config.top_p if config.top_p is not None else 0.9,
            "k": config.top_k if config.top_k is not None else 0,
            "stop_sequences": list(config.stop_sequences),
        }

    def parse_body(self, payload: dict[str, Any]) -> str:
        text = first_text(payload, "generations", "text")
        if not isinstance(text, str):
            raise self._missing("generations[0].text")
        return text
