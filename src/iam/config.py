"""Application configuration using Pydantic Settings."""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # System Configuration
    debug: bool = False
    system_user: str = "system"

    # Supabase Configuration
    supabase_url: str = "https://test.supabase.co"
    supabase_anon_key: str = "test-anon-key"
    supabase_service_role_key: str = "test-service-role-key"

    # Tables
    auth_providers_table: str = "auth_providers"
    password_users_table: str = "with_password_users"

    # Credential vault (AES key, 16/24/32 bytes)
    encryption_key: SecretStr = SecretStr("0123456789abcdef0123456789abcdef")

    # Outbound OAuth2/OIDC calls
    http_timeout_seconds: float = 10.0


settings = Settings()
