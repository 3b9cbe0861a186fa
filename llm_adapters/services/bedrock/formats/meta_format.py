"""Meta Llama 2 chat format."""

from typing import Any

from llm_adapters.config.bedrock.models import BedrockConfig, ProviderFamily
from llm_adapters.services.bedrock.base import BaseProviderFormat


class MetaLlamaFormat(BaseProviderFormat):
    @property
    def family(self) -> ProviderFamily:
        return ProviderFamily.META

    def _body(self, prompt: str, config: BedrockConfig) -> dict[str, Any]:
        return {
            "prompt": prompt,
            "max_gen_len": config.max_tokens,
            "temperature": config.temperature if config.temperature is not None else 0.7,
            "top_p": config.top_p if config.top_p is not None else 0.9,
        }

    def parse_body(self, payload: dict[str, Any]) -> str:
        text = payload.get("generation")
        if not isinstance(text, str):
            raise self._missing("generation")
        return text
