"""boto3 bedrock-runtime client construction."""

import re
import threading

import boto3
from botocore.config import Config

from llm_adapters.config.logging import get_logger
from llm_adapters.errors import InvalidRegionError

logger = get_logger(__name__)

_REGION_PATTERN = re.compile(r"^[a-z]{2}(-gov|-iso[a-z]?)?-[a-z]+-\d+$")

# Retries are the caller's concern; botocore's own retry loop is switched off
_CLIENT_CONFIG = Config(retries={"max_attempts": 1, "mode": "standard"})


def validate_region(region: str) -> str:
    """Return the region if it looks like an AWS region name, else raise InvalidRegionError."""
    region = region.strip()
    if not _REGION_PATTERN.match(region):
        raise InvalidRegionError(f"Not an AWS region: {region!r}")
    return region


def create_bedrock_runtime_client(region: str):
    """Create a bedrock-runtime client. Credentials come from the boto3 default chain."""
    client = boto3.client("bedrock-runtime", region_name=validate_region(region), config=_CLIENT_CONFIG)
    logger.info("Bedrock runtime client initialized", extra={"region": region})
    return client


class LazyBedrockClient:
    """
    Region-bound bedrock-runtime client created on first get() and reused afterwards.
    Creation happens at most once even under concurrent first use. Adapters derived from
    one another share the holder while their region is unchanged.
    """

    def __init__(self, region: str | None, client=None) -> None:
        self.region = region
        self._client = client
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._client is not None

    def get(self, default_region: str):
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = create_bedrock_runtime_client(self.region or default_region)
        return self._client
