"""Layered runtime configuration: defaults, YAML documents, environment variables."""

from roommatetap.config.errors import (
    ConfigDecodeError,
    ConfigError,
    MissingBaseConfig,
    MissingEnvironmentVariable,
    MissingOverlayConfig,
)
from roommatetap.config.loader import YamlConfigLoader, load_config
from roommatetap.config.models import AppConfig, ConfigLoadRequest

__all__ = [
    "AppConfig",
    "ConfigDecodeError",
    "ConfigError",
    "ConfigLoadRequest",
    "MissingBaseConfig",
    "MissingEnvironmentVariable",
    "MissingOverlayConfig",
    "YamlConfigLoader",
    "load_config",
]
