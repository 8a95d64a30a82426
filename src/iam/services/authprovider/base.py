"""Capability contract and identity types shared by provider adapters."""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, SerializeAsAny


class AuthToken(BaseModel):
    """
    Tokens issued by an identity provider.

    Ephemeral: returned to the login caller and never persisted here.

    Attributes:
        access_token: Bearer token for the userinfo endpoint
        refresh_token: Token for RefreshToken, "" if the provider issued none
        expires_at: Absolute UTC expiry, None if the provider gave no lifetime
    """

    access_token: str
    refresh_token: str = ""
    expires_at: datetime | None = None


class AuthIdentityType(str, Enum):
    """How a user is identified by an identity claim."""

    EMAIL = "email"
    PHONE = "phone"


class UserDetails(BaseModel):
    """User attributes that identity claims are allowed to set."""

    email: str = ""
    name: str = ""
    profile_pic: str = ""


class IdentityClaim(BaseModel, ABC):
    """A single attribute asserted by an identity provider."""

    @abstractmethod
    def update_user_details(self, user: UserDetails) -> None:
        """Apply this claim to `user` in place."""
        pass


class EmailClaim(IdentityClaim):
    email: str = ""

    def update_user_details(self, user: UserDetails) -> None:
        user.email = self.email


class NameClaim(IdentityClaim):
    name: str = ""

    def update_user_details(self, user: UserDetails) -> None:
        user.name = self.name


class ProfilePicClaim(IdentityClaim):
    profile_pic: str = ""

    def update_user_details(self, user: UserDetails) -> None:
        user.profile_pic = self.profile_pic


class AuthIdentity(BaseModel):
    """Identity claim returned by GetIdentity, tagged with its identity type."""

    type: AuthIdentityType
    metadata: SerializeAsAny[IdentityClaim]

    def update_user_details(self, user: UserDetails) -> None:
        """Apply the wrapped claim to `user`."""
        self.metadata.update_user_details(user)


class ServiceProvider(ABC):
    """
    Abstract base for external identity provider adapters.

    Supports: Google, generic OpenID Connect. Adapters are stateless per call,
    so one instance can serve concurrent logins.

    Network-bound methods accept an optional `timeout` (seconds) that bounds
    the whole upstream call; asyncio cancellation propagates unchanged. No
    retries are performed.
    """

    @abstractmethod
    def has_refresh_token_flow(self) -> bool:
        """Whether refresh_token() is meaningful for this provider."""
        pass

    @abstractmethod
    def get_auth_code_url(self, state: str) -> str:
        """
        Build the URL the user is redirected to for authentication.

        Args:
            state: CSRF correlation token, echoed back on the callback

        Returns:
            Authorization endpoint URL requesting offline access and consent
        """
        pass

    @abstractmethod
    async def verify_code(self, code: str, timeout: float | None = None) -> AuthToken:
        """
        Exchange a one-time authorization code for tokens.

        Raises:
            CodeExchangeError: On transport failure, non-2xx status or malformed body
        """
        pass

    @abstractmethod
    async def refresh_token(self, refresh_token: str, timeout: float | None = None) -> AuthToken:
        """
        Obtain a new access token with a refresh token.

        Raises:
            RefreshTokenError: On transport failure, non-2xx status or malformed body
        """
        pass

    @abstractmethod
    async def get_identity(
        self, access_token: str, timeout: float | None = None
    ) -> list[AuthIdentity]:
        """
        Fetch the user's identity claims from the userinfo endpoint.

        Raises:
            IdentityFetchError: On transport failure, non-2xx status or malformed body
        """
        pass
