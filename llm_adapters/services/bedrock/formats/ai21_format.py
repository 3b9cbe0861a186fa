"""AI21 Labs Jurassic-2 format."""

from typing import Any

from llm_adapters.config.bedrock.models import BedrockConfig, ProviderFamily
from llm_adapters.services.bedrock.base import BaseProviderFormat, first_text


class AI21Format(BaseProviderFormat):
    """Jurassic-2: camelCase sampling fields, max tokens under maxTokens."""

    @property
    def family(self) -> ProviderFamily:
        return ProviderFamily.AI21

    def _body(self, prompt: str, config: BedrockConfig) -> dict[str, Any]:
        body: dict[str, Any] = {
            "prompt": prompt,
            "maxTokens": config.max_tokens,
            "temperature": config.temperature if config.temperature is not None else 0.7,
            "topP": config.top_p if config.top_p is not None else 1.0,
        }
        if config.stop_sequences:
            body["stopSequences"] = list(config.stop_sequences)
        return body

    def parse_body(self, payload: dict[str, Any]) -> str:
        text = first_text(payload, "completions", "data", "text")
        if not isinstance(text, str):
            raise self._missing("completions[0].data.text")
        return text
