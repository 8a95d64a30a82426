"""Google OAuth2 adapter."""

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


CLIENT_ID_KEY = "@GOOGLE/CLIENT_ID"
CLIENT_SECRET_KEY = "@GOOGLE/CLIENT_SECRET"
REDIRECT_URL_KEY = "@GOOGLE/REDIRECT_URL"

AUTH_URL = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

SCOPES = [
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
]


class GoogleAuthProvider(ServiceProvider):
    """
    Google OAuth2 provider with fixed endpoints and scopes.

    Missing configuration params default to "" so construction never fails;
    a misconfigured provider surfaces as an UpstreamError at call time.

    Example:
        >>> google = GoogleAuthProvider(config)
        >>> url = google.get_auth_code_url(state="csrf-123")
        >>> token = await google.verify_code(code)
        >>> identities = await google.get_identity(token.access_token)
    """

    def __init__(
        self,
        config: AuthProvider,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        self.name = config.name
        self._oauth = OAuth2Client(
            client_id=config.get_param(CLIENT_ID_KEY),
            client_secret=config.get_param(CLIENT_SECRET_KEY),
            redirect_url=config.get_param(REDIRECT_URL_KEY),
            scopes=SCOPES,
            auth_url=AUTH_URL,
            token_url=TOKEN_URL,
            userinfo_url=USERINFO_URL,
            http_client=http_client,
            timeout=timeout,
        )

    def has_refresh_token_flow(self) -> bool:
        return True

    def get_auth_code_url(self, state: str) -> str:
        # prompt=consent makes Google re-issue a refresh token on every login
        return self._oauth.auth_code_url(state, access_type="offline", prompt="consent")

    async def verify_code(self, code: str, timeout: float | None = None) -> AuthToken:
        return await self._oauth.exchange_code(code, timeout=timeout)

    async def refresh_token(self, refresh_token: str, timeout: float | None = None) -> AuthToken:
        return await self._oauth.refresh(refresh_token, timeout=timeout, json_body=True)

    async def get_identity(
        self, access_token: str, timeout: float | None = None
    ) -> list[AuthIdentity]:
        """
        Fetch Google userinfo and map it to identity claims.

        Always returns exactly three entries (email, given name, picture), with
        empty values for fields Google did not return. Every entry is tagged
        AuthIdentityType.EMAIL for compatibility with existing consumers.
        """
        userinfo = await self._oauth.fetch_userinfo(access_token, timeout=timeout)

        return [
            AuthIdentity(
                type=AuthIdentityType.EMAIL,
                metadata=EmailClaim(email=_string_claim(userinfo, "email")),
            ),
            AuthIdentity(
                type=AuthIdentityType.EMAIL,
                metadata=NameClaim(name=_string_claim(userinfo, "given_name")),
            ),
            AuthIdentity(
                type=AuthIdentityType.EMAIL,
                metadata=ProfilePicClaim(profile_pic=_string_claim(userinfo, "picture")),
            ),
        ]


def _string_claim(userinfo: dict[str, Any], key: str) -> str:
    value = userinfo.get(key)
    return value if isinstance(value, str) else ""
