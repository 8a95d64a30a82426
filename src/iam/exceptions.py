"""Error taxonomy shared by the provider, vault and password services."""

MAX_ERROR_BODY_LENGTH = 512


class IAMError(Exception):
    """Base exception for all identity-provider errors."""

    pass


class NotFoundError(IAMError):
    """Raised when a record is absent or outside the caller's projects."""

    pass


class AuthProviderNotFoundError(NotFoundError):
    """Raised when an auth provider cannot be found."""

    def __init__(self, message: str = "auth provider not found"):
        super().__init__(message)


class UserNotFoundError(NotFoundError):
    """Raised when email, project or password do not match a stored user."""

    def __init__(self, message: str = "user not found"):
        super().__init__(message)


class UserAlreadyExistsError(IAMError):
    """Raised on signup when (email, project) is already registered."""

    def __init__(self, message: str = "user already exists"):
        super().__init__(message)


class ProjectNotFoundError(IAMError):
    """Raised when a write targets a project outside the caller's projects."""

    def __init__(self, message: str = "project not found"):
        super().__init__(message)


class UnknownProviderTypeError(IAMError):
    """Raised when no adapter is registered for a provider type."""

    def __init__(self, provider_type: str):
        self.provider_type = provider_type
        super().__init__(f"unknown auth provider: {provider_type}")


class UpstreamError(IAMError):
    """
    Raised when a call to an identity provider fails.

    Carries the upstream status code and a truncated response body so the
    failure can be diagnosed without logging whole payloads.

    Attributes:
        status_code: HTTP status of the upstream response, None on transport errors
        body: Response body truncated to MAX_ERROR_BODY_LENGTH characters
    """

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        self.status_code = status_code
        self.body = truncate_body(body)
        details = message
        if status_code is not None:
            details = f"{details}, status: {status_code}"
        if self.body:
            details = f"{details}, response: {self.body}"
        super().__init__(details)


class CodeExchangeError(UpstreamError):
    """Raised when an authorization code cannot be exchanged for tokens."""

    pass


class RefreshTokenError(UpstreamError):
    """Raised when a refresh token cannot be exchanged for a new access token."""

    pass


class IdentityFetchError(UpstreamError):
    """Raised when the userinfo endpoint fails or returns a malformed body."""

    pass


class VaultError(IAMError):
    """Base exception for credential vault failures."""

    pass


class EncryptionError(VaultError):
    """Raised when a secret cannot be encrypted."""

    pass


class DecryptionError(VaultError):
    """Raised when a stored secret cannot be decrypted."""

    pass


def truncate_body(body: str | None, limit: int = MAX_ERROR_BODY_LENGTH) -> str | None:
    """Cut an upstream response body down to `limit` characters."""
    if body is None or len(body) <= limit:
        return body
    return body[:limit] + "...(truncated)"
