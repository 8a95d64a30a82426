"""Tests for auth provider models and identity claims."""

import pytest

from src.iam.services.authprovider.base import (
    AuthIdentity,
    AuthIdentityType,
    EmailClaim,
    IdentityClaim,
    NameClaim,
    ProfilePicClaim,
    UserDetails,
)
from src.iam.services.authprovider.schemas import (
    AuthProvider,
    AuthProviderParam,
    AuthProviderType,
)


class TestAuthProvider:
    """Tests for AuthProvider."""

    def test_get_param_returns_first_match(self):
        """Test get_param returns the first value for a key."""
        provider = AuthProvider(
            name="Google",
            provider=AuthProviderType.GOOGLE,
            project_id="P1",
            params=[
                AuthProviderParam(key="@GOOGLE/CLIENT_ID", value="first"),
                AuthProviderParam(key="@GOOGLE/CLIENT_ID", value="second"),
            ],
        )

        assert provider.get_param("@GOOGLE/CLIENT_ID") == "first"
        assert provider.get_param("@GOOGLE/MISSING") == ""

    def test_known_provider_tag_parses_to_enum(self):
        """Test a known tag from JSON becomes AuthProviderType."""
        provider = AuthProvider.model_validate(
            {"name": "SSO", "provider": "OIDC", "project_id": "P1"}
        )

        assert provider.provider is AuthProviderType.OIDC

    def test_unknown_provider_tag_kept_as_string(self):
        """Test an unknown tag is kept verbatim."""
        provider = AuthProvider.model_validate(
            {"name": "MS", "provider": "MICROSOFT", "project_id": "P1"}
        )

        assert provider.provider == "MICROSOFT"
        assert not isinstance(provider.provider, AuthProviderType)

    def test_json_shape(self):
        """Test serialized field names match the stored document."""
        provider = AuthProvider(
            name="Google",
            provider=AuthProviderType.GOOGLE,
            project_id="P1",
            params=[AuthProviderParam(key="@GOOGLE/CLIENT_ID", value="x", label="Client ID")],
        )

        document = provider.model_dump(mode="json")

        assert document["provider"] == "GOOGLE"
        assert document["params"] == [
            {"label": "Client ID", "value": "x", "key": "@GOOGLE/CLIENT_ID", "is_secret": False}
        ]
        assert set(document) == {
            "id",
            "name",
            "icon",
            "provider",
            "params",
            "project_id",
            "enabled",
            "created_at",
            "created_by",
            "updated_at",
            "updated_by",
        }


class TestIdentityClaims:
    """Tests for identity claim application."""

    def test_claims_update_user_details(self):
        """Test each claim sets its own field only."""
        # Arrange
        user = UserDetails(email="old@b.c", name="Old", profile_pic="old.png")
        identities = [
            AuthIdentity(type=AuthIdentityType.EMAIL, metadata=EmailClaim(email="a@b.c")),
            AuthIdentity(type=AuthIdentityType.EMAIL, metadata=NameClaim(name="Ann")),
        ]

        # Act
        for identity in identities:
            identity.update_user_details(user)

        # Assert
        assert user == UserDetails(email="a@b.c", name="Ann", profile_pic="old.png")

    def test_profile_pic_claim(self):
        """Test ProfilePicClaim sets the profile picture."""
        user = UserDetails()

        ProfilePicClaim(profile_pic="p.png").update_user_details(user)

        assert user.profile_pic == "p.png"

    def test_claim_base_is_abstract(self):
        """Test IdentityClaim cannot be instantiated directly."""
        with pytest.raises(TypeError):
            IdentityClaim()

    def test_identity_serializes_claim_fields(self):
        """Test metadata dumps with the concrete claim's fields."""
        identity = AuthIdentity(type=AuthIdentityType.EMAIL, metadata=NameClaim(name="Ann"))

        assert identity.model_dump(mode="json") == {"type": "email", "metadata": {"name": "Ann"}}
