"""Anthropic Claude text-completions format."""

from typing import Any

from llm_adapters.config.bedrock.models import BedrockConfig, ProviderFamily
from llm_adapters.schemas.llm import Message, MessageType
from llm_adapters.services.bedrock.base import BaseProviderFormat

HUMAN_PROMPT = "\n\nHuman:"
AI_PROMPT = "\n\nAssistant:"


class AnthropicFormat(BaseProviderFormat):
    """
    Claude v2 / Instant text completions. Prompts must use the Human/Assistant turn
    delimiters; already-delimited prompts are passed through so wrapping is idempotent.
    """

    @property
    def family(self) -> ProviderFamily:
        return ProviderFamily.ANTHROPIC

    def format_prompt(self, prompt: str) -> str:
        if HUMAN_PROMPT in prompt or prompt.startswith("Human:"):
            return prompt
        return f"{HUMAN_PROMPT} {prompt}{AI_PROMPT}"

    def messages_to_prompt(self, messages: list[Message]) -> str:
        parts: list[str] = []
        for m in messages:
            if m.message_type == MessageType.AI:
                parts.append(f"{AI_PROMPT} {m.content}")
            elif m.message_type == MessageType.SYSTEM and not parts:
                # Claude 2 reads a leading system prompt placed before the first turn
                parts.append(m.content)
            else:
                parts.append(f"{HUMAN_PROMPT} {m.content}")
        return "".join(parts) + AI_PROMPT

    def _body(self, prompt: str, config: BedrockConfig) -> dict[str, Any]:
        body: dict[str, Any] = {
            "prompt": prompt,
            "max_tokens_to_sample": config.max_tokens,
        }
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
        text = payload.get("completion")
        if not isinstance(text, str):
            raise self._missing("completion")
        return text
