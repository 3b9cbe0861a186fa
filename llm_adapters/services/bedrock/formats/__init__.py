"""Provider format implementations, one per provider family."""

from llm_adapters.config.bedrock.models import BedrockConfig, ProviderFamily
from llm_adapters.services.bedrock.base import BaseProviderFormat
from llm_adapters.services.bedrock.formats.ai21_format import AI21Format
from llm_adapters.services.bedrock.formats.amazon_format import AmazonTitanFormat
from llm_adapters.services.bedrock.formats.anthropic_format import AnthropicFormat
from llm_adapters.services.bedrock.formats.cohere_format import CohereFormat
from llm_adapters.services.bedrock.formats.generic_format import GenericFormat
from llm_adapters.services.bedrock.formats.meta_format import MetaLlamaFormat

FORMAT_REGISTRY: dict[ProviderFamily, type[BaseProviderFormat]] = {
    ProviderFamily.ANTHROPIC: AnthropicFormat,
    ProviderFamily.AI21: AI21Format,
    ProviderFamily.AMAZON: AmazonTitanFormat,
    ProviderFamily.COHERE: CohereFormat,
    ProviderFamily.META: MetaLlamaFormat,
    ProviderFamily.GENERIC: GenericFormat,
}


def get_provider_format(family: ProviderFamily) -> BaseProviderFormat:
    """Return an instance of the format for the given provider family."""
    return FORMAT_REGISTRY[family]()


def format_for_config(config: BedrockConfig) -> BaseProviderFormat:
    """Resolve the config's model to its format. Raises InvalidModelError before any I/O."""
    return get_provider_format(config.provider_family)
