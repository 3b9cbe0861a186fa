import pytest
from pydantic import ValidationError

from llm_adapters.config.bedrock.models import (
    DEFAULT_BEDROCK_CONFIG,
    BedrockConfig,
    BedrockModel,
    ProviderFamily,
    requires_converse_api,
    resolve_provider,
)
from llm_adapters.errors import InvalidConfigurationError, InvalidModelError


def test_default_config():
    config = BedrockConfig()
    assert config.region == "us-west-2"
    assert config.temperature == 0.7
    assert config.max_tokens == 512
    assert config.model == BedrockModel.ANTHROPIC_CLAUDE_3_SONNET.value
    assert config.stop_sequences == ()
    assert config == DEFAULT_BEDROCK_CONFIG


def test_builder_chain_sets_fields():
    config = (
        DEFAULT_BEDROCK_CONFIG.with_model(BedrockModel.ANTHROPIC_CLAUDE_V2)
        .with_region("us-west-2")
        .with_temperature(0.5)
        .with_max_tokens(1000)
        .with_stop_sequence("STOP")
    )
    assert config.model == "anthropic.claude-v2"
    assert config.region == "us-west-2"
    assert config.temperature == 0.5
    assert config.max_tokens == 1000
    assert config.stop_sequences == ("STOP",)


def test_builder_returns_new_values():
    base = BedrockConfig()
    changed = base.with_temperature(0.9)
    assert changed is not base
    assert base.temperature == 0.7
    assert changed.temperature == 0.9


def test_stop_sequences_keep_insertion_order():
    config = BedrockConfig().with_stop_sequence("b").with_stop_sequence("a").with_stop_sequence("c")
    assert config.stop_sequences == ("b", "a", "c")


@pytest.mark.parametrize(
    "method, value",
    [
        ("with_max_tokens", 0),
        ("with_temperature", -0.1),
        ("with_temperature", 9.0),
        ("with_top_p", 1.5),
        ("with_top_k", 0),
    ],
)
def test_builder_rejects_out_of_range_values(method, value):
    with pytest.raises(InvalidConfigurationError):
        getattr(BedrockConfig(), method)(value)


def test_config_is_frozen():
    config = BedrockConfig()
    with pytest.raises(ValidationError):
        config.temperature = 0.1


@pytest.mark.parametrize("model", list(BedrockModel))
def test_known_models_resolve_to_their_vendor(model):
    assert resolve_provider(model.value) == ProviderFamily(model.value.split(".")[0])


@pytest.mark.parametrize(
    "model_id, family",
    [
        ("anthropic.claude-v2:1", ProviderFamily.ANTHROPIC),
        ("us.anthropic.claude-3-5-sonnet-20240620-v1:0", ProviderFamily.ANTHROPIC),
        ("eu.meta.llama3-2-1b-instruct-v1:0", ProviderFamily.META),
        ("amazon.titan-text-premier-v1:0", ProviderFamily.AMAZON),
        ("cohere.command-r-v1:0", ProviderFamily.COHERE),
    ],
)
def test_custom_ids_resolve_by_prefix(model_id, family):
    assert BedrockConfig(model=model_id).provider_family == family


@pytest.mark.parametrize("model_id", ["", "   ", "my-custom-model", "acme.model-1", "generic.x", "us.", "anthropic."])
def test_unknown_or_malformed_ids_are_invalid(model_id):
    with pytest.raises(InvalidModelError):
        resolve_provider(model_id)


def test_explicit_provider_wins_for_custom_ids():
    config = BedrockConfig().with_model("arn:aws:bedrock:us-east-1:123:provisioned-model/abc", ProviderFamily.GENERIC)
    assert config.provider_family == ProviderFamily.GENERIC


def test_converse_detection():
    assert requires_converse_api(BedrockModel.ANTHROPIC_CLAUDE_3_SONNET.value)
    assert requires_converse_api(BedrockModel.ANTHROPIC_CLAUDE_4_5_SONNET.value)
    assert requires_converse_api(BedrockModel.ANTHROPIC_CLAUDE_4_1_OPUS.value)
    assert requires_converse_api("us.anthropic.claude-3-5-sonnet-20240620-v1:0")
    assert not requires_converse_api(BedrockModel.ANTHROPIC_CLAUDE_V2.value)
    assert not requires_converse_api(BedrockModel.AMAZON_TITAN_TEXT_EXPRESS.value)
