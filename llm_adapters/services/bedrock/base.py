"""Base provider format and contract for Bedrock invoke_model bodies."""

from abc import ABC, abstractmethod
from typing import Any

from llm_adapters.config.bedrock.models import BedrockConfig, ProviderFamily
from llm_adapters.errors import InvalidConfigurationError, InvocationError
from llm_adapters.schemas.llm import Message, messages_to_string


class BaseProviderFormat(ABC):
    """
    Abstract provider format. Each format maps (config, prompt) to the request body its
    provider family expects and pulls the generated text back out of the response body.
    Both directions are pure; transport lives in the Bedrock adapter.
    """

    # Highest temperature the provider accepts; None means no check
    max_temperature: float | None = 1.0

    @property
    @abstractmethod
    def family(self) -> ProviderFamily:
        """Provider family this format serves."""
        ...

    @abstractmethod
    def _body(self, prompt: str, config: BedrockConfig) -> dict[str, Any]:
        ...

    @abstractmethod
    def parse_body(self, payload: dict[str, Any]) -> str:
        """Return the generated text. Raises InvocationError when the field is missing."""
        ...

    def format_prompt(self, prompt: str) -> str:
        return prompt

    def messages_to_prompt(self, messages: list[Message]) -> str:
        return messages_to_string(messages)

    def check_temperature(self, config: BedrockConfig) -> None:
        """Raise InvalidConfigurationError when the temperature exceeds the provider ceiling."""
        if (
            self.max_temperature is not None
            and config.temperature is not None
            and config.temperature > self.max_temperature
        ):
            raise InvalidConfigurationError(
                f"temperature {config.temperature} exceeds {self.max_temperature} for {self.family.value}"
            )

    def build_body(self, prompt: str, config: BedrockConfig) -> dict[str, Any]:
        """Build the request body; model_kwargs are merged over the provider fields."""
        self.check_temperature(config)
        body = self._body(self.format_prompt(prompt), config)
        body.update(config.model_kwargs)
        return body

    def _missing(self, path: str) -> InvocationError:
        return InvocationError(f"{self.family.value} response has no text at {path}")


def first_text(payload: dict[str, Any], list_key: str, *path: str) -> Any:
    """Walk payload[list_key][0][path...]; return None when any step is absent."""
    items = payload.get(list_key)
    if not isinstance(items, list) or not items:
        return None
    node: Any = items[0]
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node
