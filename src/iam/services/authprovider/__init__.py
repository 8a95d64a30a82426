"""
Auth provider services.

Provides the provider capability contract, the Google and OIDC adapters,
the encrypted configuration store and the project-scoped service.

Usage:
    >>> from src.iam.services.authprovider import get_auth_provider_service
    >>> service = get_auth_provider_service()
    >>> adapter = service.resolve_provider(provider_id)
    >>> token = await adapter.verify_code(code)
    >>> identities = await adapter.get_identity(token.access_token)
"""

from functools import lru_cache

from src.iam.services.authprovider.base import (
    AuthIdentity,
    AuthIdentityType,
    AuthToken,
    EmailClaim,
    IdentityClaim,
    NameClaim,
    ProfilePicClaim,
    ServiceProvider,
    UserDetails,
)
from src.iam.services.authprovider.factory import DEFAULT_PROVIDERS, ProviderFactory
from src.iam.services.authprovider.google import GoogleAuthProvider
from src.iam.services.authprovider.oidc import OIDCAuthProvider
from src.iam.services.authprovider.schemas import (
    AuthProvider,
    AuthProviderParam,
    AuthProviderType,
)
from src.iam.services.authprovider.service import AuthProviderService
from src.iam.services.authprovider.store import AuthProviderStore
from src.iam.services.database.utils import get_query_builder
from src.iam.services.vault import get_vault


@lru_cache(maxsize=1)
def get_auth_provider_service() -> AuthProviderService:
    """Get the auth provider service wired to Supabase and the vault (singleton pattern)."""
    store = AuthProviderStore(vault=get_vault(), db=get_query_builder())
    return AuthProviderService(store=store, factory=ProviderFactory())


__all__ = [
    "get_auth_provider_service",
    "AuthProviderService",
    "AuthProviderStore",
    "ProviderFactory",
    "DEFAULT_PROVIDERS",
    "ServiceProvider",
    "GoogleAuthProvider",
    "OIDCAuthProvider",
    "AuthProvider",
    "AuthProviderParam",
    "AuthProviderType",
    "AuthToken",
    "AuthIdentity",
    "AuthIdentityType",
    "IdentityClaim",
    "EmailClaim",
    "NameClaim",
    "ProfilePicClaim",
    "UserDetails",
]
