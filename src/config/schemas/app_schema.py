"""Main application configuration schema."""
from typing import Any, Dict

from pydantic import BaseModel, Field

from .logging_schema import LoggingConfig
from .provider_schema import PollingConfig, ProviderConfig, ServerDefaultsConfig


class AppConfig(BaseModel):
    """Application configuration."""

    version: str = Field("1.0.0", description="Configuration version")
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    server_defaults: ServerDefaultsConfig = Field(default_factory=ServerDefaultsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        return cls.model_validate(data)


def validate_config(config: Dict[str, Any]) -> AppConfig:
    """
    Validate configuration.

    Args:
        config: Configuration to validate

    Returns:
        Validated configuration

    Raises:
        pydantic.ValidationError: If configuration is invalid
    """
    return AppConfig.from_dict(config)
