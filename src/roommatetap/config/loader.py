from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from roommatetap.config.defaults import populate_defaults
from roommatetap.config.derived import build_google_login
from roommatetap.config.documents import LOCAL_ENVIRONMENT, deep_merge, load_documents
from roommatetap.config.environment import (
    ENVIRONMENT_TAG_VAR,
    bind_environment,
    read_environ,
    secret_document_keys,
)
from roommatetap.config.errors import ConfigDecodeError
from roommatetap.config.interfaces import ConfigLoader
from roommatetap.config.models import (
    AppConfig,
    AuthSettings,
    CacheSettings,
    ConfigLoadRequest,
    EmailSettings,
    EmailSubjects,
    EmailTemplates,
    GoogleLoginSettings,
    HTTPSettings,
    LimiterSettings,
    LoggingSettings,
    SMTPSettings,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _subtree(tree: Mapping[str, Any], section: str) -> Any:
    cur: Any = tree
    for segment in section.split("."):
        if not isinstance(cur, Mapping):
            raise ConfigDecodeError(section, f"'{segment}' is not inside a mapping")
        cur = cur.get(segment)
        if cur is None:
            return {}
    return cur


def _decode(tree: Mapping[str, Any], section: str, model: Type[T]) -> T:
    data = _subtree(tree, section)
    if not isinstance(data, Mapping):
        raise ConfigDecodeError(section, f"expected a mapping, got {type(data).__name__}")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ConfigDecodeError(section, str(e)) from e


def decode_sections(tree: Mapping[str, Any]) -> dict[str, BaseModel]:
    """Decode the document-sourced sections of the merged tree into typed groups."""
    cache = _decode(tree, "cache", CacheSettings)
    email = EmailSettings(
        templates=_decode(tree, "email.templates", EmailTemplates),
        subjects=_decode(tree, "email.subjects", EmailSubjects),
    )
    return {
        "cache": cache,
        "email": email,
        "limiter": _decode(tree, "limiter", LimiterSettings),
        "auth": _decode(tree, "auth", AuthSettings),
        "smtp": _decode(tree, "smtp", SMTPSettings),
        "http": _decode(tree, "http", HTTPSettings),
        "google": _decode(tree, "google", GoogleLoginSettings),
        "logging": _decode(tree, "logging", LoggingSettings),
    }


class YamlConfigLoader(ConfigLoader):
    def load(self, request: ConfigLoadRequest = ConfigLoadRequest()) -> AppConfig:
        dotenv_path = Path(request.dotenv_path) if request.dotenv_path is not None else None
        environ = read_environ(request.environ, dotenv_path)
        environment = environ.get(ENVIRONMENT_TAG_VAR, "")

        tree = populate_defaults()
        deep_merge(tree, load_documents(Path(request.configs_dir), environment))
        for key in secret_document_keys(tree):
            logger.warning("config.secret_in_document_ignored key=%s", key)

        sections = decode_sections(tree)
        google = sections.pop("google")
        config = AppConfig(**sections)

        config = bind_environment(config, environ, strict=request.strict_env)
        config = config.model_copy(
            update={"google_login": build_google_login(google, environ, strict=request.strict_env)}
        )

        logger.info(
            "config.loaded environment=%s overlay=%s",
            config.environment,
            None if environment == LOCAL_ENVIRONMENT else environment,
        )
        return config


def load_config(
    configs_dir: Union[str, Path],
    *,
    dotenv_path: Optional[str] = ".env",
    environ: Optional[Mapping[str, str]] = None,
    strict_env: bool = False,
) -> AppConfig:
    """Resolve the runtime configuration once at process start. Any error is fatal for the process."""
    request = ConfigLoadRequest(
        configs_dir=str(configs_dir),
        dotenv_path=dotenv_path,
        environ=environ,
        strict_env=strict_env,
    )
    return YamlConfigLoader().load(request)
