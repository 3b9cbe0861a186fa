"""
AWS Bedrock LLM adapter.

Formats a prompt for the model's provider family, invokes bedrock-runtime, and extracts
the generated text. Claude 3+ models go through the Converse API; older models use
invoke_model with a provider-specific JSON body.

    bedrock = (
        Bedrock()
        .with_model(BedrockModel.ANTHROPIC_CLAUDE_V2)
        .with_region("us-east-1")
        .with_temperature(0.7)
    )
    text = await bedrock.invoke("What is the capital of France?")
"""

import asyncio
import json
from functools import partial
from typing import Any, Callable

from botocore.exceptions import BotoCoreError, ClientError

from llm_adapters.config.bedrock.models import (
    DEFAULT_BEDROCK_CONFIG,
    BedrockConfig,
    BedrockModel,
    ProviderFamily,
)
from llm_adapters.config.logging import get_logger
from llm_adapters.config.settings import get_settings
from llm_adapters.errors import AwsError, InvocationError
from llm_adapters.resources.bedrock.client import LazyBedrockClient
from llm_adapters.schemas.llm import GenerateResult, Message, TokenUsage
from llm_adapters.services.bedrock.base import BaseProviderFormat
from llm_adapters.services.bedrock.converse import build_converse_request, parse_converse_response
from llm_adapters.services.bedrock.formats import format_for_config

logger = get_logger(__name__)

INPUT_TOKENS_HEADER = "x-amzn-bedrock-input-token-count"
OUTPUT_TOKENS_HEADER = "x-amzn-bedrock-output-token-count"


def _invoke_model_sync(client: Any, **kwargs: Any) -> tuple[bytes, dict[str, str]]:
    response = client.invoke_model(**kwargs)
    headers = (response.get("ResponseMetadata") or {}).get("HTTPHeaders") or {}
    return response["body"].read(), headers


def usage_from_headers(headers: dict[str, str]) -> TokenUsage | None:
    """Token counts reported by invoke_model response headers, if present."""
    if INPUT_TOKENS_HEADER not in headers and OUTPUT_TOKENS_HEADER not in headers:
        return None
    prompt_tokens = int(headers.get(INPUT_TOKENS_HEADER, 0) or 0)
    completion_tokens = int(headers.get(OUTPUT_TOKENS_HEADER, 0) or 0)
    return TokenUsage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
    )


class Bedrock:
    """
    Bedrock LLM client. Holds an immutable BedrockConfig and a bedrock-runtime client that
    is created on first call and reused. Builder methods return new instances.
    """

    def __init__(self, config: BedrockConfig | None = None, client: Any | None = None) -> None:
        self.config = config or DEFAULT_BEDROCK_CONFIG
        self._lazy_client = LazyBedrockClient(self.config.region, client)

    def _replace(self, config: BedrockConfig) -> "Bedrock":
        derived = Bedrock(config)
        if config.region == self.config.region:
            derived._lazy_client = self._lazy_client
        return derived

    def with_model(self, model: BedrockModel | str, provider: ProviderFamily | None = None) -> "Bedrock":
        return self._replace(self.config.with_model(model, provider))

    def with_provider(self, provider: ProviderFamily | None) -> "Bedrock":
        return self._replace(self.config.with_provider(provider))

    def with_region(self, region: str) -> "Bedrock":
        return self._replace(self.config.with_region(region))

    def with_temperature(self, temperature: float) -> "Bedrock":
        return self._replace(self.config.with_temperature(temperature))

    def with_max_tokens(self, max_tokens: int) -> "Bedrock":
        return self._replace(self.config.with_max_tokens(max_tokens))

    def with_top_p(self, top_p: float) -> "Bedrock":
        return self._replace(self.config.with_top_p(top_p))

    def with_top_k(self, top_k: int) -> "Bedrock":
        return self._replace(self.config.with_top_k(top_k))

    def with_stop_sequence(self, stop: str) -> "Bedrock":
        return self._replace(self.config.with_stop_sequence(stop))

    def with_model_kwargs(self, model_kwargs: dict[str, Any]) -> "Bedrock":
        return self._replace(self.config.with_model_kwargs(model_kwargs))

    @property
    def region(self) -> str:
        return self.config.region or get_settings().aws_region

    def _get_client(self) -> Any:
        """Return the bedrock-runtime client, creating it on first use."""
        return self._lazy_client.get(self.region)

    def format_prompt(self, prompt: str) -> str:
        return format_for_config(self.config).format_prompt(prompt)

    def build_request_body(self, prompt: str) -> dict[str, Any]:
        """Provider-specific invoke_model body. Raises InvalidModelError before any I/O."""
        return format_for_config(self.config).build_body(prompt, self.config)

    def parse_response(self, response_body: bytes) -> str:
        return self._parse(format_for_config(self.config), response_body)

    def _parse(self, fmt: BaseProviderFormat, response_body: bytes) -> str:
        try:
            payload = json.loads(response_body)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvocationError(f"Bedrock response is not JSON: {e}") from e
        if not isinstance(payload, dict):
            raise InvocationError("Bedrock response is not a JSON object")
        return fmt.parse_body(payload)

    async def _send(self, operation: str, fn: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, fn)
        except (ClientError, BotoCoreError) as e:
            logger.warning(
                "Bedrock call failed",
                extra={"operation": operation, "model_id": self.config.model, "error": str(e)},
            )
            raise AwsError(f"Bedrock {operation} failed: {e}") from e

    async def _invoke_model(self, prompt: str) -> GenerateResult:
        fmt = format_for_config(self.config)
        body = fmt.build_body(prompt, self.config)
        client = self._get_client()
        raw, headers = await self._send(
            "invoke_model",
            partial(
                _invoke_model_sync,
                client,
                modelId=self.config.model,
                contentType="application/json",
                accept="application/json",
                body=json.dumps(body),
            ),
        )
        text = self._parse(fmt, raw)
        return GenerateResult(generation=text, tokens=usage_from_headers(headers))

    async def _converse(self, messages: list[Message]) -> GenerateResult:
        # Unknown ids and out-of-range temperatures fail before any I/O
        format_for_config(self.config).check_temperature(self.config)
        request = build_converse_request(messages, self.config)
        client = self._get_client()
        response = await self._send("converse", partial(client.converse, **request))
        return parse_converse_response(response)

    async def generate(self, messages: list[Message]) -> GenerateResult:
        """Generate a reply to a conversation."""
        if self.config.uses_converse_api:
            return await self._converse(messages)
        prompt = format_for_config(self.config).messages_to_prompt(messages)
        return await self._invoke_model(prompt)

    async def invoke(self, prompt: str) -> str:
        """Generate text for a single prompt."""
        if self.config.uses_converse_api:
            result = await self._converse([Message.human(prompt)])
        else:
            result = await self._invoke_model(prompt)
        return result.generation

    async def batch_generate(self, prompts: list[str]) -> list[str]:
        """
        One generation per prompt, in input order. Prompts run one after another and the
        first failure aborts the batch.
        """
        generations: list[str] = []
        for prompt in prompts:
            generations.append(await self.invoke(prompt))
        logger.info("Bedrock batch completed", extra={"model_id": self.config.model, "count": len(generations)})
        return generations
