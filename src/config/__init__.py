"""Configuration package with clean public API."""

from .schemas import (
    AppConfig, validate_config,
    ProviderConfig, PollingConfig, ServerDefaultsConfig,
    LoggingConfig, LogFileConfig, LogDestination,
)
from .manager import ConfigurationManager

__all__ = [
    'AppConfig',
    'validate_config',
    'ProviderConfig',
    'PollingConfig',
    'ServerDefaultsConfig',
    'LoggingConfig',
    'LogFileConfig',
    'LogDestination',
    'ConfigurationManager',
]
