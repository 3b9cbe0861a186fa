import asyncio
import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from llm_adapters.config.bedrock.models import BedrockConfig, BedrockModel
from llm_adapters.errors import (
    AwsError,
    InvalidConfigurationError,
    InvalidModelError,
    InvalidRegionError,
    InvocationError,
)
from llm_adapters.schemas.llm import Message
from llm_adapters.services.bedrock.llm import Bedrock


class _Body:
    def __init__(self, data: bytes) -> None:
        self._data = data

    def read(self) -> bytes:
        return self._data


class FakeBedrockClient:
    """Echoes the prompt back in the Claude v2 completion shape; can fail on the n-th call."""

    def __init__(self, fail_on_call: int | None = None, raw_body: bytes | None = None) -> None:
        self.calls: list[dict] = []
        self.converse_calls: list[dict] = []
        self.fail_on_call = fail_on_call
        self.raw_body = raw_body

    def invoke_model(self, **kwargs):
        self.calls.append(kwargs)
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise ClientError({"Error": {"Code": "ThrottlingException", "Message": "slow down"}}, "InvokeModel")
        if self.raw_body is not None:
            data = self.raw_body
        else:
            prompt = json.loads(kwargs["body"])["prompt"]
            question = prompt.split("Human: ", 1)[1].split("\n\nAssistant:", 1)[0]
            data = json.dumps({"completion": f"answer to {question}"}).encode()
        return {
            "body": _Body(data),
            "ResponseMetadata": {
                "HTTPHeaders": {
                    "x-amzn-bedrock-input-token-count": "12",
                    "x-amzn-bedrock-output-token-count": "5",
                }
            },
        }

    def converse(self, **kwargs):
        self.converse_calls.append(kwargs)
        return {
            "output": {"message": {"role": "assistant", "content": [{"text": "4"}]}},
            "usage": {"inputTokens": 9, "outputTokens": 1, "totalTokens": 10},
            "stopReason": "end_turn",
        }


def _claude_v2(client) -> Bedrock:
    return Bedrock(BedrockConfig(model=BedrockModel.ANTHROPIC_CLAUDE_V2), client=client)


def test_invoke_sends_formatted_body_and_returns_text():
    client = FakeBedrockClient()
    bedrock = _claude_v2(client).with_temperature(0.2)

    text = asyncio.run(bedrock.invoke("What is Rust?"))

    assert text == "answer to What is Rust?"
    call = client.calls[0]
    assert call["modelId"] == "anthropic.claude-v2"
    assert call["contentType"] == "application/json"
    body = json.loads(call["body"])
    assert body["prompt"] == "\n\nHuman: What is Rust?\n\nAssistant:"
    assert body["temperature"] == 0.2


def test_generate_reports_token_usage_from_headers():
    bedrock = _claude_v2(FakeBedrockClient())
    result = asyncio.run(bedrock.generate([Message.human("Hi")]))
    assert result.generation == "answer to Hi"
    assert result.tokens is not None
    assert result.tokens.prompt_tokens == 12
    assert result.tokens.completion_tokens == 5
    assert result.tokens.total_tokens == 17


def test_batch_generate_preserves_order():
    client = FakeBedrockClient()
    prompts = ["What is machine learning?", "What is deep learning?", "What is neural network?"]

    generations = asyncio.run(_claude_v2(client).batch_generate(prompts))

    assert generations == [f"answer to {p}" for p in prompts]
    assert len(client.calls) == 3


def test_batch_generate_aborts_on_first_failure():
    client = FakeBedrockClient(fail_on_call=2)
    prompts = ["What is machine learning?", "What is deep learning?", "What is neural network?"]

    with pytest.raises(AwsError):
        asyncio.run(_claude_v2(client).batch_generate(prompts))
    assert len(client.calls) == 2


def test_transport_errors_are_wrapped():
    class Unreachable(FakeBedrockClient):
        def invoke_model(self, **kwargs):
            raise EndpointConnectionError(endpoint_url="https://bedrock-runtime.us-west-2.amazonaws.com")

    with pytest.raises(AwsError) as exc_info:
        asyncio.run(_claude_v2(Unreachable()).invoke("hi"))
    assert isinstance(exc_info.value.__cause__, EndpointConnectionError)


def test_unparseable_response_is_invocation_error_not_transport_error():
    client = FakeBedrockClient(raw_body=b'{"unexpected": true}')
    with pytest.raises(InvocationError):
        asyncio.run(_claude_v2(client).invoke("hi"))


def test_invalid_model_fails_before_any_network_call(monkeypatch):
    def _no_client(region):
        raise AssertionError("client must not be created")

    monkeypatch.setattr("llm_adapters.resources.bedrock.client.create_bedrock_runtime_client", _no_client)
    bedrock = Bedrock().with_model("acme.super-model-v1")

    with pytest.raises(InvalidModelError):
        asyncio.run(bedrock.invoke("Test"))


def test_invalid_region_fails_before_client_creation(monkeypatch):
    def _no_boto(*args, **kwargs):
        raise AssertionError("boto3 must not be called")

    monkeypatch.setattr("llm_adapters.resources.bedrock.client.boto3.client", _no_boto)
    bedrock = Bedrock().with_model(BedrockModel.ANTHROPIC_CLAUDE_V2).with_region("invalid-region")

    with pytest.raises(InvalidRegionError):
        asyncio.run(bedrock.invoke("Test"))


def test_client_is_created_once_and_reused(monkeypatch):
    created: list[str] = []

    def _factory(region):
        created.append(region)
        return FakeBedrockClient()

    monkeypatch.setattr("llm_adapters.resources.bedrock.client.create_bedrock_runtime_client", _factory)
    bedrock = Bedrock(BedrockConfig(model=BedrockModel.ANTHROPIC_CLAUDE_V2, region="eu-west-1"))

    asyncio.run(bedrock.invoke("one"))
    asyncio.run(bedrock.with_temperature(0.1).invoke("two"))

    assert created == ["eu-west-1"]


def test_client_creation_is_once_under_concurrent_first_use(monkeypatch):
    created: list[str] = []
    lock = threading.Lock()

    def _slow_factory(region):
        time.sleep(0.05)
        with lock:
            created.append(region)
        return FakeBedrockClient()

    monkeypatch.setattr("llm_adapters.resources.bedrock.client.create_bedrock_runtime_client", _slow_factory)
    bedrock = Bedrock(BedrockConfig(model=BedrockModel.ANTHROPIC_CLAUDE_V2))

    with ThreadPoolExecutor(max_workers=8) as pool:
        clients = list(pool.map(lambda _: bedrock._get_client(), range(8)))

    assert len(created) == 1
    assert all(c is clients[0] for c in clients)


def test_changing_region_drops_cached_client():
    client = FakeBedrockClient()
    bedrock = _claude_v2(client)
    assert bedrock.with_max_tokens(10)._get_client() is client
    assert not bedrock.with_region("us-east-1")._lazy_client.initialized


def test_claude_3_uses_converse_api():
    client = FakeBedrockClient()
    bedrock = Bedrock(BedrockConfig(max_tokens=100), client=client)

    result = asyncio.run(
        bedrock.generate([Message.system("Answer with a number."), Message.human("What is 2+2?")])
    )

    assert result.generation == "4"
    assert result.tokens.total_tokens == 10
    assert client.calls == []
    request = client.converse_calls[0]
    assert request["modelId"] == BedrockModel.ANTHROPIC_CLAUDE_3_SONNET.value
    assert request["system"] == [{"text": "Answer with a number."}]
    assert request["messages"] == [{"role": "user", "content": [{"text": "What is 2+2?"}]}]
    assert request["inferenceConfig"] == {"maxTokens": 100, "temperature": 0.7}


def test_invoke_on_converse_model_returns_text():
    client = FakeBedrockClient()
    assert asyncio.run(Bedrock(client=client).invoke("What is 2+2?")) == "4"
    assert len(client.converse_calls) == 1


def test_converse_temperature_above_ceiling_fails_before_call():
    client = FakeBedrockClient()
    bedrock = Bedrock(client=client).with_temperature(3.0)

    with pytest.raises(InvalidConfigurationError):
        asyncio.run(bedrock.invoke("hi"))
    assert client.converse_calls == []
