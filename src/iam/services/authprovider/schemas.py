"""Pydantic models for stored auth provider configuration."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class AuthProviderType(str, Enum):
    """External identity provider variants with a registered adapter."""

    GOOGLE = "GOOGLE"
    OIDC = "OIDC"


class AuthProviderParam(BaseModel):
    """
    One configuration entry of an auth provider.

    Keys are namespaced by provider (e.g. "@GOOGLE/CLIENT_ID"). Values of
    params with is_secret=True are ciphertext in storage.
    """

    label: str = ""
    value: str = ""
    key: str
    is_secret: bool = False


class AuthProvider(BaseModel):
    """
    Auth provider configuration for a project.

    `provider` is parsed into AuthProviderType when it names a known variant
    and kept as the raw string otherwise, so that records written by other
    versions still load and are rejected by the factory instead of here.

    Example:
        >>> provider = AuthProvider(
        ...     name="Google",
        ...     provider=AuthProviderType.GOOGLE,
        ...     project_id="p1",
        ...     params=[
        ...         AuthProviderParam(key="@GOOGLE/CLIENT_ID", value="x"),
        ...         AuthProviderParam(key="@GOOGLE/CLIENT_SECRET", value="y", is_secret=True),
        ...     ],
        ... )
        >>> provider.get_param("@GOOGLE/CLIENT_ID")
        'x'
    """

    id: str = ""
    name: str
    icon: str = ""
    provider: AuthProviderType | str = Field(union_mode="left_to_right")
    params: list[AuthProviderParam] = Field(default_factory=list)
    project_id: str
    enabled: bool = True
    created_at: datetime | None = None
    created_by: str = ""
    updated_at: datetime | None = None
    updated_by: str = ""

    def get_param(self, key: str) -> str:
        """Return the value of the first param with `key`, or "" if absent."""
        for param in self.params:
            if param.key == key:
                return param.value
        return ""
