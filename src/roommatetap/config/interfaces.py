from __future__ import annotations

from typing import Protocol

from roommatetap.config.models import AppConfig, ConfigLoadRequest


class ConfigLoader(Protocol):
    """
    Loads the effective runtime configuration.

    Precedence, lowest first: built-in defaults, ``main`` document, environment overlay
    document, environment variables. Implementations raise ``ConfigError`` subclasses and
    never return a partially resolved snapshot.
    """

    def load(self, request: ConfigLoadRequest = ConfigLoadRequest()) -> AppConfig:
        ...
