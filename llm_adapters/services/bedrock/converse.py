"""Bedrock Converse API request/response mapping for Claude 3 and later."""

from typing import Any

from llm_adapters.config.bedrock.models import BedrockConfig
from llm_adapters.errors import InvalidInputError, InvocationError
from llm_adapters.schemas.llm import GenerateResult, Message, MessageType, TokenUsage


def build_converse_request(messages: list[Message], config: BedrockConfig) -> dict[str, Any]:
    """
    Map messages to converse() kwargs. System messages go to the top-level system field;
    consecutive turns with the same role are merged because Converse requires alternation.
    """
    system: list[dict[str, str]] = []
    turns: list[dict[str, Any]] = []
    for m in messages:
        if m.message_type == MessageType.SYSTEM:
            system.append({"text": m.content})
            continue
        role = "assistant" if m.message_type == MessageType.AI else "user"
        if turns and turns[-1]["role"] == role:
            turns[-1]["content"].append({"text": m.content})
        else:
            turns.append({"role": role, "content": [{"text": m.content}]})
    if not turns:
        raise InvalidInputError("Converse needs at least one non-system message")

    inference: dict[str, Any] = {"maxTokens": config.max_tokens}
    if config.temperature is not None:
        inference["temperature"] = config.temperature
    if config.top_p is not None:
        inference["topP"] = config.top_p
    if config.stop_sequences:
        inference["stopSequences"] = list(config.stop_sequences)

    request: dict[str, Any] = {
        "modelId": config.model,
        "messages": turns,
        "inferenceConfig": inference,
    }
    if system:
        request["system"] = system
    extra: dict[str, Any] = {}
    if config.top_k is not None:
        extra["top_k"] = config.top_k
    extra.update(config.model_kwargs)
    if extra:
        request["additionalModelRequestFields"] = extra
    return request


def parse_converse_response(response: dict[str, Any]) -> GenerateResult:
    message = (response.get("output") or {}).get("message") or {}
    content = message.get("content")
    if not isinstance(content, list):
        raise InvocationError("converse response has no output.message.content")
    texts = [block["text"] for block in content if isinstance(block, dict) and isinstance(block.get("text"), str)]
    if not texts:
        raise InvocationError("converse response contained no text blocks")

    usage = response.get("usage")
    tokens = None
    if isinstance(usage, dict):
        tokens = TokenUsage(
            prompt_tokens=int(usage.get("inputTokens", 0) or 0),
            completion_tokens=int(usage.get("outputTokens", 0) or 0),
            total_tokens=int(usage.get("totalTokens", 0) or 0),
        )
    return GenerateResult(generation="".join(texts), tokens=tokens)
