from __future__ import annotations

from typing import Mapping

from roommatetap.config.environment import GOOGLE_CLIENT_ID_VAR, GOOGLE_CLIENT_SECRET_VAR, lookup
from roommatetap.config.models import GoogleLoginSettings, OAuthClientSettings, OAuthEndpoint


def build_google_login(
    settings: GoogleLoginSettings,
    environ: Mapping[str, str],
    *,
    strict: bool = False,
) -> OAuthClientSettings:
    """
    Google OAuth client for the login flow.

    Redirect URL, scopes and endpoint come from the ``google`` section (defaults apply);
    the credentials only ever come from the environment. Missing credentials still give a
    well-formed descriptor; the OAuth exchange fails at first use instead.
    """
    return OAuthClientSettings(
        redirect_url=settings.redirect_url,
        client_id=lookup(environ, GOOGLE_CLIENT_ID_VAR, strict=strict),
        client_secret=lookup(environ, GOOGLE_CLIENT_SECRET_VAR, strict=strict),
        scopes=settings.scopes,
        endpoint=OAuthEndpoint(auth_url=settings.auth_url, token_url=settings.token_url),
    )
