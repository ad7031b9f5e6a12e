# src/config/defaults.py
from typing import Any, Dict

DEFAULT_CONFIG_FILENAMES = ("dimensiondata.yml", "dimensiondata.yaml", "dimensiondata.json")
CONFIG_DIR_ENV_VAR = "DD_CONFIG_DIR"

DEFAULT_CONFIG: Dict[str, Any] = {
    "version": "1.0.0",

    # CloudControl connection and allocation
    "provider": {
        "region": "dd-na",
        "username": "${DD_USERNAME:}",
        "password": "${DD_PASSWORD:}",
        "api_base_url": "",
        "request_timeout": 30,
        "network_domain_description": "Cloudera Director 2.1.1 dedicated network.",
        "max_parallel_servers": 4,
    },

    # Readiness polling
    "polling": {
        "initial_interval": 1,
        "max_interval": 8,
        "timeout": 180,
        "delete_timeout": 300,
        "delete_initial_delay": 30,
    },

    # Compute size when the template does not set one
    "server_defaults": {
        "cpu_count": 4,
        "memory_gb": 32,
    },

    # Logging configuration
    "logging": {
        "level": "INFO",
        "destination": "stdout",
        "file": {
            "path": "${DD_LOG_DIR:logs}/dimensiondata.log",
            "max_size_mb": 10,
            "backup_count": 5,
        },
    },
}

# Environment variable -> configuration path. Applied after the config file.
ENV_OVERRIDES = {
    "DD_REGION": ("provider", "region"),
    "DD_API_BASE_URL": ("provider", "api_base_url"),
    "DD_REQUEST_TIMEOUT": ("provider", "request_timeout"),
    "DD_MAX_PARALLEL_SERVERS": ("provider", "max_parallel_servers"),
    "DD_POLL_TIMEOUT": ("polling", "timeout"),
    "DD_DELETE_TIMEOUT": ("polling", "delete_timeout"),
    "DD_LOG_LEVEL": ("logging", "level"),
    "DD_LOG_DESTINATION": ("logging", "destination"),
    "DD_LOG_FILE": ("logging", "file", "path"),
}
