"""Shared fixtures for auth provider tests."""

from collections.abc import Callable

import httpx
import pytest

from src.iam.services.authprovider.factory import ProviderFactory
from src.iam.services.authprovider.schemas import (
    AuthProvider,
    AuthProviderParam,
    AuthProviderType,
)
from src.iam.services.authprovider.service import AuthProviderService
from src.iam.services.authprovider.store import AuthProviderStore


class RecordingTransport:
    """Collects outgoing requests and answers them with a handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def mock_http():
    """
    Build an httpx.AsyncClient backed by a handler function.

    Example:
        >>> client, transport = mock_http(lambda r: httpx.Response(200, json={}))
        >>> provider = GoogleAuthProvider(config, http_client=client)
    """

    def _build(handler: Callable[[httpx.Request], httpx.Response]):
        transport = RecordingTransport(handler)
        return httpx.AsyncClient(transport=httpx.MockTransport(transport)), transport

    return _build


@pytest.fixture
def google_config() -> AuthProvider:
    """Provide a Google provider configuration with one secret param."""
    return AuthProvider(
        name="Google",
        icon="google.svg",
        provider=AuthProviderType.GOOGLE,
        project_id="P1",
        params=[
            AuthProviderParam(label="Client ID", key="@GOOGLE/CLIENT_ID", value="x"),
            AuthProviderParam(
                label="Client Secret", key="@GOOGLE/CLIENT_SECRET", value="y", is_secret=True
            ),
            AuthProviderParam(
                label="Redirect URL",
                key="@GOOGLE/REDIRECT_URL",
                value="https://app.example.com/callback",
            ),
        ],
    )


@pytest.fixture
def oidc_config() -> AuthProvider:
    """Provide an OIDC provider configuration against a fictional issuer."""
    return AuthProvider(
        name="Acme SSO",
        provider=AuthProviderType.OIDC,
        project_id="P2",
        params=[
            AuthProviderParam(key="@OIDC/CLIENT_ID", value="acme-client"),
            AuthProviderParam(key="@OIDC/CLIENT_SECRET", value="acme-secret", is_secret=True),
            AuthProviderParam(key="@OIDC/REDIRECT_URL", value="https://app.example.com/oidc"),
            AuthProviderParam(
                key="@OIDC/AUTHORIZATION_URL", value="https://idp.example.com/authorize"
            ),
            AuthProviderParam(key="@OIDC/TOKEN_URL", value="https://idp.example.com/token"),
            AuthProviderParam(key="@OIDC/USERINFO_URL", value="https://idp.example.com/userinfo"),
        ],
    )


@pytest.fixture
def store(vault, fake_db) -> AuthProviderStore:
    """Provide a store over the in-memory document store."""
    return AuthProviderStore(vault, fake_db, table="auth_providers")


@pytest.fixture
def service(store) -> AuthProviderService:
    """Provide a service with the default provider factory."""
    return AuthProviderService(store, ProviderFactory())
