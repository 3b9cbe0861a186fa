"""Environment-based application settings. Read-only; no business logic."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="llm-adapters", description="Service name")
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Runtime environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Log level name")

    # AWS Bedrock (credentials come from the boto3 default chain)
    aws_region: str = Field(default="us-east-1", description="Fallback AWS region for Bedrock")
    bedrock_default_model: str | None = Field(
        default=None, description="Model id used by the HTTP surface when a request names none"
    )

    # Wikipedia / MediaWiki
    wikipedia_user_agent: str = Field(
        default="llm-adapters/0.1 (https://www.mediawiki.org/wiki/API:Etiquette)",
        description="User-Agent sent to MediaWiki (required by API etiquette)",
    )
    wikipedia_timeout_seconds: float = Field(
        default=10.0, gt=0, description="HTTP timeout for MediaWiki requests (seconds)"
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance. Use for app lifetime."""
    return Settings()
