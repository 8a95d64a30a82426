"""OAuth2 authorization-code and refresh-token protocol handling over httpx."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from typing import Any
from urllib.parse import urlencode

import httpx

from src.iam.config import settings
from src.iam.exceptions import (
    CodeExchangeError,
    IdentityFetchError,
    RefreshTokenError,
    UpstreamError,
)
from src.iam.services.authprovider.base import AuthToken

logger = logging.getLogger(__name__)


class OAuth2Client:
    """
    Minimal OAuth2 client for one provider configuration.

    Builds authorization URLs and performs the token and userinfo round trips.
    Every upstream failure is raised as a subclass of UpstreamError carrying
    the status code and a truncated body; a successful-looking result is
    never fabricated from a failed or malformed response.

    Attributes:
        client_id: OAuth2 client identifier
        client_secret: OAuth2 client secret (never logged)
        redirect_url: Registered callback URL
        scopes: Requested scopes
        auth_url: Authorization endpoint
        token_url: Token endpoint
        userinfo_url: Userinfo endpoint
        timeout: Default per-call timeout in seconds

    Example:
        >>> client = OAuth2Client(
        ...     client_id="id",
        ...     client_secret="secret",
        ...     redirect_url="https://app.example.com/callback",
        ...     scopes=["openid", "email"],
        ...     auth_url="https://idp.example.com/authorize",
        ...     token_url="https://idp.example.com/token",
        ...     userinfo_url="https://idp.example.com/userinfo",
        ... )
        >>> token = await client.exchange_code("code-from-callback")
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_url: str,
        scopes: list[str],
        auth_url: str,
        token_url: str,
        userinfo_url: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize OAuth2 client.

        Args:
            client_id: OAuth2 client identifier
            client_secret: OAuth2 client secret
            redirect_url: Registered callback URL
            scopes: Requested scopes
            auth_url: Authorization endpoint
            token_url: Token endpoint
            userinfo_url: Userinfo endpoint
            http_client: Shared client to use instead of one per call (not closed here)
            timeout: Default per-call timeout (default: settings.http_timeout_seconds)
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_url = redirect_url
        self.scopes = list(scopes)
        self.auth_url = auth_url
        self.token_url = token_url
        self.userinfo_url = userinfo_url
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self._http_client = http_client

    def auth_code_url(self, state: str, **extra: str) -> str:
        """
        Build the authorization endpoint URL.

        Args:
            state: CSRF correlation token
            **extra: Additional query parameters (e.g. access_type, prompt)

        Returns:
            Authorization URL with query string
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_url,
            "response_type": "code",
            "scope": " ".join(self.scopes),
            "state": state,
            **extra,
        }
        if not self.auth_url:
            logger.warning(
                "Authorization endpoint is not configured, returning a relative URL",
                extra={"error_type": "auth_url_missing", "client_id": self.client_id},
            )
        separator = "&" if "?" in self.auth_url else "?"
        return f"{self.auth_url}{separator}{urlencode(params)}"

    async def exchange_code(self, code: str, timeout: float | None = None) -> AuthToken:
        """
        Exchange an authorization code at the token endpoint.

        Raises:
            CodeExchangeError: If the exchange fails
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_url,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        response = await self._send(
            "POST",
            self.token_url,
            CodeExchangeError,
            "error verifying the code",
            timeout,
            data=data,
            headers={"Accept": "application/json"},
        )
        payload = self._parse_json(response, CodeExchangeError)
        return self._token_from_payload(payload, response, CodeExchangeError)

    async def refresh(
        self, refresh_token: str, timeout: float | None = None, json_body: bool = False
    ) -> AuthToken:
        """
        Exchange a refresh token for a new access token.

        When the provider does not rotate refresh tokens, the supplied one is
        returned in the new AuthToken.

        Args:
            refresh_token: Previously issued refresh token
            timeout: Per-call timeout override
            json_body: Send the grant as JSON instead of a form body

        Raises:
            RefreshTokenError: If the refresh fails
        """
        grant = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }
        body: dict[str, Any] = {"json": grant} if json_body else {"data": grant}
        response = await self._send(
            "POST",
            self.token_url,
            RefreshTokenError,
            "error refreshing the token",
            timeout,
            headers={"Accept": "application/json"},
            **body,
        )
        payload = self._parse_json(response, RefreshTokenError)
        return self._token_from_payload(payload, response, RefreshTokenError, refresh_token)

    async def fetch_userinfo(self, access_token: str, timeout: float | None = None) -> dict[str, Any]:
        """
        Fetch userinfo claims with a bearer access token.

        Raises:
            IdentityFetchError: If the request fails or the body is not a JSON object
        """
        response = await self._send(
            "GET",
            self.userinfo_url,
            IdentityFetchError,
            "error fetching the identity",
            timeout,
            headers={"Authorization": f"Bearer {access_token}", "Accept": "application/json"},
        )
        return self._parse_json(response, IdentityFetchError)

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient() as client:
            yield client

    async def _send(
        self,
        method: str,
        url: str,
        error_cls: type[UpstreamError],
        message: str,
        timeout: float | None,
        **kwargs: Any,
    ) -> httpx.Response:
        if not url:
            raise error_cls(f"{message}: endpoint is not configured")

        effective_timeout = timeout if timeout is not None else self.timeout
        try:
            async with self._client() as client:
                response = await client.request(method, url, timeout=effective_timeout, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(
                f"{message}: {type(e).__name__}",
                extra={"error_type": error_cls.__name__, "url": url},
            )
            raise error_cls(f"{message}: {type(e).__name__}: {e}") from e

        if not response.is_success:
            logger.warning(
                f"{message}: upstream returned {response.status_code}",
                extra={
                    "error_type": error_cls.__name__,
                    "url": url,
                    "status_code": response.status_code,
                },
            )
            raise error_cls(message, status_code=response.status_code, body=response.text)

        return response

    @staticmethod
    def _parse_json(response: httpx.Response, error_cls: type[UpstreamError]) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as e:
            raise error_cls(
                "error unmarshalling the response",
                status_code=response.status_code,
                body=response.text,
            ) from e

        if not isinstance(payload, dict):
            raise error_cls(
                "error unmarshalling the response: expected a JSON object",
                status_code=response.status_code,
                body=response.text,
            )
        return payload

    @staticmethod
    def _token_from_payload(
        payload: dict[str, Any],
        response: httpx.Response,
        error_cls: type[UpstreamError],
        fallback_refresh_token: str = "",
    ) -> AuthToken:
        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise error_cls(
                "token response is missing access_token",
                status_code=response.status_code,
                body=response.text,
            )

        refresh_token = payload.get("refresh_token")
        if not isinstance(refresh_token, str) or not refresh_token:
            refresh_token = fallback_refresh_token

        expires_at = None
        expires_in = payload.get("expires_in")
        if expires_in is not None:
            try:
                seconds = int(expires_in)
                if seconds > 0:
                    expires_at = datetime.now(UTC) + timedelta(seconds=seconds)
            except (TypeError, ValueError, OverflowError) as e:
                raise error_cls(
                    f"token response has invalid expires_in: {expires_in!r}",
                    status_code=response.status_code,
                    body=response.text,
                ) from e

        return AuthToken(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
        )
