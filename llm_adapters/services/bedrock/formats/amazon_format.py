"""Amazon Titan Text format."""

from typing import Any

from llm_adapters.config.bedrock.models import BedrockConfig, ProviderFamily
from llm_adapters.services.bedrock.base import BaseProviderFormat, first_text


class AmazonTitanFormat(BaseProviderFormat):
    """Titan Text: prompt under inputText, sampling nested in textGenerationConfig."""

    @property
    def family(self) -> ProviderFamily:
        return ProviderFamily.AMAZON

    def _body(self, prompt: str, config: BedrockConfig) -> dict[str, Any]:
        return {
            "inputText": prompt,
            "textGenerationConfig": {
                "maxTokenCount": config.max_tokens,
                "temperature": config.temperature if config.temperature is not None else 0.7,
                "topP": config.top_p if config.top_p is not None else 1.0,
                "stopSequences": list(config.stop_sequences),
            },
        }

    def parse_body(self, payload: dict[str, Any]) -> str:
        text = first_text(payload, "results", "outputText")
        if not isinstance(text, str):
            raise self._missing("results[0].outputText")
        return text
