"""Environment variable expansion for configuration values."""
import os
import re
from typing import Any

# ${VAR}, ${VAR:default} or $VAR
_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::([^}]*))?\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def _replace(match: re.Match) -> str:
    braced_name, default, bare_name = match.group(1), match.group(2), match.group(3)
    name = braced_name or bare_name
    if name in os.environ:
        return os.environ[name]
    if default is not None:
        return default
    return match.group(0)


def expand_env_vars(value: Any) -> Any:
    """
    Expand environment variable references in strings, recursing into dicts and lists.

    Unset variables without a default are left as written.
    """
    if isinstance(value, str):
        return _ENV_PATTERN.sub(_replace, value)
    if isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(v) for v in value]
    return value


def expand_config_env_vars(config: dict) -> dict:
    """Expand environment variables throughout a configuration dictionary."""
    return expand_env_vars(config)
