"""Configuration management for the provider."""
from __future__ import annotations
import copy
import json
import logging
import os
import threading
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError as PydanticValidationError

from src.config.defaults import CONFIG_DIR_ENV_VAR, DEFAULT_CONFIG, DEFAULT_CONFIG_FILENAMES, ENV_OVERRIDES
from src.config.schemas import AppConfig
from src.config.utils.env_expansion import expand_config_env_vars
from src.domain.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ConfigurationManager:
    """
    Builds the application configuration.

    Sources, lowest priority first:
    - DEFAULT_CONFIG
    - an optional JSON or YAML file
    - ``DD_*`` environment variable overrides

    ``${VAR}``, ``${VAR:default}`` and ``$VAR`` references are expanded before
    validation. The validated AppConfig is built lazily and cached.
    """

    def __init__(self, config_file: Optional[str] = None, config_dir: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Explicit configuration file. Must exist when given.
            config_dir: Directory searched for dimensiondata.yml/.yaml/.json.
                        Defaults to $DD_CONFIG_DIR.
        """
        self._config_file = config_file
        self._config_dir = config_dir if config_dir is not None else os.environ.get(CONFIG_DIR_ENV_VAR)
        self._lock = threading.RLock()
        self._app_config: Optional[AppConfig] = None

    @property
    def app_config(self) -> AppConfig:
        """Lazy load application configuration."""
        if self._app_config is None:
            with self._lock:
                if self._app_config is None:
                    self._app_config = self._load_app_config()
        return self._app_config

    def get_config(self) -> Dict[str, Any]:
        """Return the raw merged and expanded configuration dictionary."""
        config = copy.deepcopy(DEFAULT_CONFIG)

        config_path = self._find_config_file()
        if config_path:
            logger.info(f"Loading configuration from {config_path}")
            self._merge_config(config, self._load_config_file(config_path))

        self._apply_env_overrides(config)
        return expand_config_env_vars(config)

    def reload(self) -> AppConfig:
        with self._lock:
            self._app_config = None
        return self.app_config

    def _load_app_config(self) -> AppConfig:
        config = self.get_config()
        try:
            return AppConfig.from_dict(config)
        except PydanticValidationError as e:
            fields = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
            raise ConfigurationError(f"Invalid configuration: {str(e)}", fields) from e

    def _find_config_file(self) -> Optional[str]:
        if self._config_file:
            if not os.path.exists(self._config_file):
                raise ConfigurationError(f"Configuration file not found: {self._config_file}")
            return self._config_file

        if self._config_dir:
            for filename in DEFAULT_CONFIG_FILENAMES:
                path = os.path.join(self._config_dir, filename)
                if os.path.exists(path):
                    return path
        return None

    @staticmethod
    def _load_config_file(config_path: str) -> Dict[str, Any]:
        """Load configuration from a JSON or YAML file."""
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if config_path.endswith((".yml", ".yaml")):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load configuration: {str(e)}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {config_path} must contain a mapping")
        return data

    @staticmethod
    def _merge_config(target: Dict[str, Any], source: Dict[str, Any]) -> None:
        """Deep-merge ``source`` into ``target``; file values win."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                ConfigurationManager._merge_config(target[key], value)
            else:
                target[key] = value

    @staticmethod
    def _apply_env_overrides(config: Dict[str, Any]) -> None:
        for env_var, path in ENV_OVERRIDES.items():
            if env_var not in os.environ:
                continue
            current = config
            for key in path[:-1]:
                current = current.setdefault(key, {})
            current[path[-1]] = os.environ[env_var]
            logger.debug(f"Configuration {'.'.join(path)} overridden by {env_var}")
