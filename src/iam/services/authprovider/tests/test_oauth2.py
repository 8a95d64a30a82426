"""Tests for the shared OAuth2 client."""

import logging
from unittest.mock import patch
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from src.iam.exceptions import MAX_ERROR_BODY_LENGTH, CodeExchangeError
from src.iam.services.authprovider.oauth2 import OAuth2Client


def make_client(**overrides) -> OAuth2Client:
    options = {
        "client_id": "id",
        "client_secret": "secret",
        "redirect_url": "https://app.example.com/cb",
        "scopes": ["openid"],
        "auth_url": "https://idp.example.com/authorize",
        "token_url": "https://idp.example.com/token",
        "userinfo_url": "https://idp.example.com/userinfo",
    }
    options.update(overrides)
    return OAuth2Client(**options)


class TestAuthCodeUrl:
    """Tests for OAuth2Client.auth_code_url."""

    def test_appends_to_existing_query(self):
        """Test an authorization URL that already has a query string is extended."""
        # Arrange
        client = make_client(auth_url="https://idp.example.com/authorize?tenant=acme")

        # Act
        url = client.auth_code_url("s1")

        # Assert
        query = parse_qs(urlsplit(url).query)
        assert query["tenant"] == ["acme"]
        assert query["state"] == ["s1"]
        assert url.count("?") == 1

    def test_state_is_url_encoded(self):
        """Test special characters in state survive the round trip."""
        # Act
        url = make_client().auth_code_url("a b&c=d")

        # Assert
        assert parse_qs(urlsplit(url).query)["state"] == ["a b&c=d"]

    def test_missing_auth_url_logs_warning(self, caplog):
        """Test an unconfigured authorization endpoint is reported."""
        # Arrange
        client = make_client(auth_url="")

        # Act
        with caplog.at_level(logging.WARNING, logger="src.iam.services.authprovider.oauth2"):
            url = client.auth_code_url("s1")

        # Assert
        assert url.startswith("?")
        assert "Authorization endpoint is not configured" in caplog.text

    def test_configured_auth_url_does_not_warn(self, caplog):
        """Test no warning is logged when the endpoint is set."""
        with caplog.at_level(logging.WARNING, logger="src.iam.services.authprovider.oauth2"):
            make_client().auth_code_url("s1")

        assert "not configured" not in caplog.text


class TestDefaults:
    """Tests for OAuth2Client configuration defaults."""

    def test_timeout_defaults_to_settings(self):
        """Test the default timeout comes from settings."""
        with patch("src.iam.services.authprovider.oauth2.settings") as mock_settings:
            mock_settings.http_timeout_seconds = 7.0
            assert make_client().timeout == 7.0

    def test_scopes_are_copied(self):
        """Test later changes to the caller's list do not leak into the client."""
        # Arrange
        scopes = ["openid"]
        client = make_client(scopes=scopes)

        # Act
        scopes.append("admin")

        # Assert
        assert client.scopes == ["openid"]


@pytest.mark.asyncio
class TestErrorBodies:
    """Tests for upstream error details."""

    async def test_long_error_body_is_truncated(self):
        """Test the body kept on the error is bounded."""
        # Arrange
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="e" * 5000))
        client = make_client(http_client=httpx.AsyncClient(transport=transport))

        # Act & Assert
        with pytest.raises(CodeExchangeError) as exc_info:
            await client.exchange_code("c1")

        assert exc_info.value.body.startswith("e" * MAX_ERROR_BODY_LENGTH)
        assert len(exc_info.value.body) < 5000

    async def test_client_secret_not_in_error(self):
        """Test the client secret never appears in the raised error."""
        # Arrange
        transport = httpx.MockTransport(lambda request: httpx.Response(401, text="denied"))
        client = make_client(http_client=httpx.AsyncClient(transport=transport))

        # Act & Assert
        with pytest.raises(CodeExchangeError) as exc_info:
            await client.exchange_code("c1")

        assert "secret" not in str(exc_info.value)
