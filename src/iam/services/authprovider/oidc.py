"""Generic OpenID Connect adapter."""

import logging
from typing import Any

import httpx

from src.iam.services.authprovider.base import (
    AuthIdentity,
    AuthIdentityType,
    AuthToken,
    EmailClaim,
    NameClaim,
    ProfilePicClaim,
    ServiceProvider,
)
from src.iam.services.authprovider.oauth2 import OAuth2Client
from src.iam.services.authprovider.schemas import AuthProvider

logger = logging.getLogger(__name__)

CLIENT_ID_KEY = "@OIDC/CLIENT_ID"
CLIENT_SECRET_KEY = "@OIDC/CLIENT_SECRET"
REDIRECT_URL_KEY = "@OIDC/REDIRECT_URL"
AUTHORIZATION_URL_KEY = "@OIDC/AUTHORIZATION_URL"
TOKEN_URL_KEY = "@OIDC/TOKEN_URL"
USERINFO_URL_KEY = "@OIDC/USERINFO_URL"
SCOPES_KEY = "@OIDC/SCOPES"

DEFAULT_SCOPES = ["openid", "profile", "email"]


class OIDCAuthProvider(ServiceProvider):
    """
    OpenID Connect provider with externally configured endpoints.

    Configuration params:
    - @OIDC/CLIENT_ID, @OIDC/CLIENT_SECRET, @OIDC/REDIRECT_URL
    - @OIDC/AUTHORIZATION_URL, @OIDC/TOKEN_URL, @OIDC/USERINFO_URL
    - @OIDC/SCOPES: space separated, optional (default: "openid profile email")

    Discovery (.well-known/openid-configuration) is not performed; endpoints
    must be configured explicitly.
    """

    def __init__(
        self,
        config: AuthProvider,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        self.name = config.name
        scopes = config.get_param(SCOPES_KEY).split() or DEFAULT_SCOPES
        self._oauth = OAuth2Client(
            client_id=config.get_param(CLIENT_ID_KEY),
            client_secret=config.get_param(CLIENT_SECRET_KEY),
            redirect_url=config.get_param(REDIRECT_URL_KEY),
            scopes=scopes,
            auth_url=config.get_param(AUTHORIZATION_URL_KEY),
            token_url=config.get_param(TOKEN_URL_KEY),
            userinfo_url=config.get_param(USERINFO_URL_KEY),
            http_client=http_client,
            timeout=timeout,
        )

    def has_refresh_token_flow(self) -> bool:
        return True

    def get_auth_code_url(self, state: str) -> str:
        return self._oauth.auth_code_url(state, access_type="offline", prompt="consent")

    async def verify_code(self, code: str, timeout: float | None = None) -> AuthToken:
        return await self._oauth.exchange_code(code, timeout=timeout)

    async def refresh_token(self, refresh_token: str, timeout: float | None = None) -> AuthToken:
        return await self._oauth.refresh(refresh_token, timeout=timeout)

    async def get_identity(
        self, access_token: str, timeout: float | None = None
    ) -> list[AuthIdentity]:
        """
        Fetch OIDC userinfo and map the claims that are present.

        Returns 0-3 entries: email if present, a display name if one can be
        derived (see resolve_display_name), picture if present.
        """
        userinfo = await self._oauth.fetch_userinfo(access_token, timeout=timeout)
        identities: list[AuthIdentity] = []

        email = _string_claim(userinfo, "email")
        if email:
            identities.append(
                AuthIdentity(type=AuthIdentityType.EMAIL, metadata=EmailClaim(email=email))
            )

        name = resolve_display_name(userinfo)
        if name:
            identities.append(
                AuthIdentity(type=AuthIdentityType.EMAIL, metadata=NameClaim(name=name))
            )

        picture = _string_claim(userinfo, "picture")
        if picture:
            identities.append(
                AuthIdentity(
                    type=AuthIdentityType.EMAIL,
                    metadata=ProfilePicClaim(profile_pic=picture),
                )
            )

        logger.debug(
            f"Resolved {len(identities)} identity claims from {self.name}",
            extra={"provider": self.name, "claim_count": len(identities)},
        )
        return identities


def resolve_display_name(userinfo: dict[str, Any]) -> str:
    """
    Pick a display name from OIDC claims.

    Precedence: name > "given_name family_name" > given_name > preferred_username.
    Returns "" when none is present.
    """
    name = _string_claim(userinfo, "name")
    if name:
        return name

    given_name = _string_claim(userinfo, "given_name")
    family_name = _string_claim(userinfo, "family_name")
    if given_name and family_name:
        return f"{given_name} {family_name}"
    if given_name:
        return given_name

    return _string_claim(userinfo, "preferred_username")


def _string_claim(userinfo: dict[str, Any], key: str) -> str:
    value = userinfo.get(key)
    return value if isinstance(value, str) else ""
