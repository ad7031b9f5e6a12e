"""Configuration schemas package."""

from .app_schema import AppConfig, validate_config
from .logging_schema import LogDestination, LogFileConfig, LoggingConfig
from .provider_schema import PollingConfig, ProviderConfig, ServerDefaultsConfig

__all__ = [
    "AppConfig",
    "validate_config",
    "ProviderConfig",
    "PollingConfig",
    "ServerDefaultsConfig",
    "LoggingConfig",
    "LogFileConfig",
    "LogDestination",
]
