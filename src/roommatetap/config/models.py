from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Literal, Mapping, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from roommatetap.config.durations import Duration

M = TypeVar("M", bound=BaseModel)

_TOKEN_POLICY_KEYS = ("accessTokenTTL", "refreshTokenTTL", "access_token_ttl", "refresh_token_ttl")


class HTTPSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    host: str = ""
    port: str = ""
    max_header_megabytes: int = Field(
        default=1,
        alias="maxHeaderMegabytes",
        validation_alias=AliasChoices("maxHeaderMegabytes", "maxHeaderBytes", "max_header_megabytes"),
    )
    read_timeout: Duration = Field(default=timedelta(0), alias="readTimeout")
    write_timeout: Duration = Field(default=timedelta(0), alias="writeTimeout")

    @property
    def max_header_bytes(self) -> int:
        return self.max_header_megabytes << 20


class DatabaseSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    host: str = ""
    port: str = ""
    sslmode: str = ""
    user: str = ""
    password: str = ""


class CacheSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    ttl: Duration = timedelta(0)


class RedisSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    address: str = ""
    password: str = ""
    db: str = ""


class JWTSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    access_token_ttl: Duration = Field(default=timedelta(0), alias="accessTokenTTL")
    refresh_token_ttl: Duration = Field(default=timedelta(0), alias="refreshTokenTTL")
    signing_key: str = Field(default="", alias="signingKey")


class AuthSettings(BaseModel):
    """
    Authentication policy.

    Documents keep the token lifetimes directly under ``auth`` (``auth.accessTokenTTL``);
    they are gathered into the nested ``jwt`` group on validation. Keys already written under
    ``auth.jwt`` take precedence over the flat ones.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    jwt: JWTSettings = Field(default_factory=JWTSettings)
    password_salt: str = Field(default="", alias="passwordSalt")
    verification_code_length: int = Field(default=0, alias="verificationCodeLength")

    @model_validator(mode="before")
    @classmethod
    def nest_token_policy(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        flat = {k: data[k] for k in _TOKEN_POLICY_KEYS if k in data}
        if not flat:
            return data
        out = {k: v for k, v in data.items() if k not in flat}
        jwt = dict(flat)
        jwt.update(out.get("jwt") or {})
        out["jwt"] = jwt
        return out


class SMTPSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    host: str = ""
    port: int = 0
    sender: str = Field(default="", alias="from")
    password: str = Field(default="", alias="pass")


class EmailTemplates(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    verification: str = Field(default="", alias="verification_email")
    purchase_successful: str = ""


class EmailSubjects(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    verification: str = Field(default="", alias="verification_email")
    purchase_successful: str = ""


class EmailSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    templates: EmailTemplates = Field(default_factory=EmailTemplates)
    subjects: EmailSubjects = Field(default_factory=EmailSubjects)


class LimiterSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    rps: int = 0
    burst: int = 0
    ttl: Duration = timedelta(0)


class GoogleLoginSettings(BaseModel):
    """Document-overridable parts of the Google OAuth client."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    redirect_url: str = Field(default="", alias="redirectUrl")
    scopes: tuple[str, ...] = ()
    auth_url: str = Field(default="", alias="authUrl")
    token_url: str = Field(default="", alias="tokenUrl")


class OAuthEndpoint(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    auth_url: str = ""
    token_url: str = ""


class OAuthClientSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    redirect_url: str = ""
    client_id: str = ""
    client_secret: str = ""
    scopes: tuple[str, ...] = ()
    endpoint: OAuthEndpoint = Field(default_factory=OAuthEndpoint)


class FileRotationSettings(BaseModel):
    """
    Date-based rotation settings (daily).

    This maps cleanly to Python's standard library TimedRotatingFileHandler behavior.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    backup_count: int = Field(default=5, alias="backupCount")


class FileLoggingSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    path: Optional[str] = None
    rotation: FileRotationSettings = Field(default_factory=FileRotationSettings)


class LoggingSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: FileLoggingSettings = Field(default_factory=FileLoggingSettings)


class AppConfig(BaseModel):
    """
    Effective runtime configuration after applying all precedence rules.

    Built once at process start and passed explicitly to every consumer. Instances are
    frozen; use ``replace_field`` to derive a new snapshot.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    environment: str = ""
    http: HTTPSettings = Field(default_factory=HTTPSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    smtp: SMTPSettings = Field(default_factory=SMTPSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)
    limiter: LimiterSettings = Field(default_factory=LimiterSettings)
    google_login: OAuthClientSettings = Field(default_factory=OAuthClientSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def replace_field(model: M, path: str, value: Any) -> M:
    """Return a copy of ``model`` with the dotted attribute ``path`` set to ``value``."""
    head, _, rest = path.partition(".")
    if head not in type(model).model_fields:
        raise AttributeError(f"Unknown configuration field: {path}")
    if rest:
        value = replace_field(getattr(model, head), rest, value)
    return model.model_copy(update={head: value})


@dataclass(frozen=True, slots=True)
class ConfigLoadRequest:
    """
    Inputs for a configuration loader.

    ``environ`` replaces the process environment when given (tests pass a plain dict).
    With ``strict_env`` an unset bound variable fails the load instead of binding "".
    """

    configs_dir: str = "configs"
    dotenv_path: Optional[str] = ".env"
    environ: Optional[Mapping[str, str]] = None
    strict_env: bool = False
