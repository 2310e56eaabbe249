from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from roommatetap.config.errors import MissingEnvironmentVariable
from roommatetap.config.models import AppConfig, replace_field

logger = logging.getLogger(__name__)

ENVIRONMENT_TAG_VAR = "APP_ENV"
GOOGLE_CLIENT_ID_VAR = "GOOGLE_CLIENT_ID"
GOOGLE_CLIENT_SECRET_VAR = "GOOGLE_CLIENT_SECRET"


@dataclass(frozen=True, slots=True)
class EnvBinding:
    """
    One environment variable owning one snapshot field.

    ``document_key`` is where the same value would sit in a config document; only set for
    secrets, which are never taken from documents.
    """

    variable: str
    field: str
    secret: bool = False
    document_key: Optional[str] = None


BINDINGS: tuple[EnvBinding, ...] = (
    EnvBinding(ENVIRONMENT_TAG_VAR, "environment"),
    EnvBinding("HTTP_HOST", "http.host"),
    EnvBinding("HTTP_PORT", "http.port"),
    EnvBinding("DB_NAME", "database.name"),
    EnvBinding("DB_HOST", "database.host"),
    EnvBinding("DB_PORT", "database.port"),
    EnvBinding("DB_USER", "database.user"),
    EnvBinding("DB_PASSWORD", "database.password", secret=True, document_key="database.password"),
    EnvBinding("DB_SSLMODE", "database.sslmode"),
    EnvBinding("PASSWORD_SALT", "auth.password_salt", secret=True, document_key="auth.passwordSalt"),
    EnvBinding("JWT_SIGNING_KEY", "auth.jwt.signing_key", secret=True, document_key="auth.signingKey"),
    EnvBinding("SMTP_PASSWORD", "smtp.password", secret=True, document_key="smtp.pass"),
    EnvBinding("REDIS_ADDRESS", "redis.address"),
    EnvBinding("REDIS_PASSWORD", "redis.password", secret=True, document_key="redis.password"),
    EnvBinding("REDIS_DB", "redis.db"),
)

# Secrets bound outside BINDINGS (see derived.py) that may still show up in documents.
DERIVED_SECRET_DOCUMENT_KEYS = ("google.clientSecret", "google.client_secret")


def read_environ(environ: Optional[Mapping[str, str]] = None, dotenv_path: Optional[Path] = None) -> dict[str, str]:
    """
    Snapshot of the variables visible to the binder.

    Values from the ``.env`` file fill in variables the process environment does not set;
    ``os.environ`` itself is left untouched.
    """
    merged: dict[str, str] = {}
    if dotenv_path is not None and dotenv_path.exists():
        try:
            from dotenv import dotenv_values  # type: ignore[import-not-found]
        except ModuleNotFoundError as e:  # pragma: no cover
            raise ModuleNotFoundError(
                "Missing dependency: python-dotenv is required to load .env. Install 'python-dotenv'."
            ) from e
        merged.update({k: v for k, v in dotenv_values(dotenv_path).items() if v is not None})
        logger.debug("config.dotenv_loaded path=%s keys=%s", dotenv_path, len(merged))

    merged.update(os.environ if environ is None else environ)
    return merged


def lookup(environ: Mapping[str, str], name: str, *, strict: bool = False) -> str:
    if name in environ:
        return environ[name]
    if strict:
        raise MissingEnvironmentVariable(name)
    return ""


def _has_path(tree: Mapping[str, Any], dotted: str) -> bool:
    cur: Any = tree
    for segment in dotted.split("."):
        if not isinstance(cur, Mapping) or segment not in cur:
            return False
        cur = cur[segment]
    return True


def secret_document_keys(tree: Mapping[str, Any]) -> list[str]:
    """Document keys that hold a secret. Their values are ignored in favour of the environment."""
    keys = [b.document_key for b in BINDINGS if b.document_key] + list(DERIVED_SECRET_DOCUMENT_KEYS)
    return [k for k in keys if _has_path(tree, k)]


def bind_environment(config: AppConfig, environ: Mapping[str, str], *, strict: bool = False) -> AppConfig:
    """
    Overwrite every binder-owned field with its environment value.

    Unset variables bind "" unless ``strict`` is true. Returns a new snapshot.
    """
    unset = []
    for binding in BINDINGS:
        if binding.variable not in environ:
            unset.append(binding.variable)
        config = replace_field(config, binding.field, lookup(environ, binding.variable, strict=strict))

    if unset:
        logger.debug("config.env_unset variables=%s", ",".join(unset))
    return config
