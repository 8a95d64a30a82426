"""Credential vault used to protect secrets at rest."""

from functools import lru_cache

from src.iam.config import settings
from src.iam.services.vault.aesgcm import AESGCMVault
from src.iam.services.vault.base import CredentialVault


@lru_cache(maxsize=1)
def get_vault() -> CredentialVault:
    """
    Get the configured credential vault (singleton pattern).

    Raises:
        ValueError: If ENCRYPTION_KEY is not a valid AES key length
    """
    return AESGCMVault(settings.encryption_key.get_secret_value().encode("utf-8"))


__all__ = [
    "CredentialVault",
    "AESGCMVault",
    "get_vault",
]
