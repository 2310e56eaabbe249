from __future__ import annotations

from pathlib import Path


class ConfigError(RuntimeError):
    """Raised when the runtime configuration cannot be resolved."""


class MissingBaseConfig(ConfigError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Base config document not usable: {path} ({reason})")
        self.path = path
        self.reason = reason


class MissingOverlayConfig(ConfigError):
    def __init__(self, environment: str, configs_dir: Path, reason: str = "not found") -> None:
        super().__init__(
            f"Overlay config document for environment {environment!r} not usable in {configs_dir} ({reason})"
        )
        self.environment = environment
        self.configs_dir = configs_dir
        self.reason = reason


class ConfigDecodeError(ConfigError):
    def __init__(self, section: str, detail: str) -> None:
        super().__init__(f"Invalid config section '{section}': {detail}")
        self.section = section
        self.detail = detail


class MissingEnvironmentVariable(ConfigError):
    """Only raised in strict mode; the default policy binds an empty value."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Required environment variable is not set: {name}")
        self.name = name
