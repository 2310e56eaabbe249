from __future__ import annotations

from datetime import timedelta
from typing import Any

DEFAULT_HTTP_PORT = "8000"
DEFAULT_HTTP_RW_TIMEOUT = timedelta(seconds=10)
DEFAULT_HTTP_MAX_HEADER_MEGABYTES = 1
DEFAULT_ACCESS_TOKEN_TTL = timedelta(minutes=15)
DEFAULT_REFRESH_TOKEN_TTL = timedelta(days=30)
DEFAULT_LIMITER_RPS = 10
DEFAULT_LIMITER_BURST = 2
DEFAULT_LIMITER_TTL = timedelta(minutes=10)
DEFAULT_VERIFICATION_CODE_LENGTH = 8

DEFAULT_GOOGLE_REDIRECT_URL = "http://localhost:8000/api/v1/users/google_callback"
DEFAULT_GOOGLE_SCOPES = (
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
)
DEFAULT_GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/auth"
DEFAULT_GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"


def populate_defaults() -> dict[str, Any]:
    """Fallback values keyed the same way as config documents. Returns a fresh tree on every call."""
    return {
        "http": {
            "port": DEFAULT_HTTP_PORT,
            "maxHeaderMegabytes": DEFAULT_HTTP_MAX_HEADER_MEGABYTES,
            "readTimeout": DEFAULT_HTTP_RW_TIMEOUT,
            "writeTimeout": DEFAULT_HTTP_RW_TIMEOUT,
        },
        "auth": {
            "accessTokenTTL": DEFAULT_ACCESS_TOKEN_TTL,
            "refreshTokenTTL": DEFAULT_REFRESH_TOKEN_TTL,
            "verificationCodeLength": DEFAULT_VERIFICATION_CODE_LENGTH,
        },
        "limiter": {
            "rps": DEFAULT_LIMITER_RPS,
            "burst": DEFAULT_LIMITER_BURST,
            "ttl": DEFAULT_LIMITER_TTL,
        },
        "google": {
            "redirectUrl": DEFAULT_GOOGLE_REDIRECT_URL,
            "scopes": list(DEFAULT_GOOGLE_SCOPES),
            "authUrl": DEFAULT_GOOGLE_AUTH_URL,
            "tokenUrl": DEFAULT_GOOGLE_TOKEN_URL,
        },
    }
