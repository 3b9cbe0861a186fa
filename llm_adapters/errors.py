"""Adapter error taxonomy. Every failure surfaces as exactly one of these kinds."""


class AdapterError(Exception):
    """Base class for all adapter errors."""


class InvalidConfigurationError(AdapterError):
    """Configuration rejected before any I/O (unknown model, bad limits, bad region)."""


class InvalidModelError(InvalidConfigurationError):
    """Model identifier does not resolve to exactly one provider family."""


class InvalidRegionError(InvalidConfigurationError):
    """Region string is not a usable AWS region name."""


class InvalidInputError(AdapterError):
    """Caller input rejected before any I/O (empty query, wrong input shape)."""


class TransportError(AdapterError):
    """The remote call itself failed: network, auth, or service error. Never retried here."""


class AwsError(TransportError):
    """Bedrock runtime call failed inside boto3/botocore."""


class WikipediaRequestError(TransportError):
    """MediaWiki request failed (connection error or non-2xx status)."""


class ParseError(AdapterError):
    """The call succeeded but the response did not have the expected shape."""


class InvocationError(ParseError):
    """Bedrock response body could not be parsed for the resolved provider family."""


class WikipediaResponseError(ParseError):
    """MediaWiki response body was not valid JSON or lacked the expected structure."""
