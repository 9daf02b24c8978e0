"""Configuration management for newshub."""

from .loader import DEFAULT_CONFIG_PATH, Config, load_config, save_config
from .models import (
    ConfigModel,
    FetchDefaults,
    LoggingConfig,
    PostgresConfig,
    ProviderConfig,
    ProvidersConfig,
    QueryDefaults,
)

__all__ = [
    "Config",
    "ConfigModel",
    "DEFAULT_CONFIG_PATH",
    "FetchDefaults",
    "LoggingConfig",
    "PostgresConfig",
    "ProviderConfig",
    "ProvidersConfig",
    "QueryDefaults",
    "load_config",
    "save_config",
]
