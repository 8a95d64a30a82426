"""AES-GCM credential vault."""

import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from src.iam.exceptions import DecryptionError, EncryptionError
from src.iam.services.vault.base import CredentialVault

logger = logging.getLogger(__name__)

NONCE_SIZE = 12
VALID_KEY_SIZES = (16, 24, 32)


class AESGCMVault(CredentialVault):
    """
    Authenticated encryption of secrets with AES-GCM.

    Ciphertext format is hex(nonce || ciphertext || tag) with a random 12-byte
    nonce per call, so encrypting the same value twice gives different output.

    Example:
        >>> vault = AESGCMVault(b"0123456789abcdef")
        >>> stored = vault.encrypt("client-secret")
        >>> vault.decrypt(stored)
        'client-secret'
    """

    def __init__(self, key: bytes):
        """
        Initialize the vault.

        Args:
            key: AES key of 16, 24 or 32 bytes

        Raises:
            ValueError: If the key has an invalid length
        """
        if len(key) not in VALID_KEY_SIZES:
            raise ValueError(f"Encryption key must be 16, 24 or 32 bytes, got {len(key)}")
        self._cipher = AESGCM(key)

    def encrypt(self, plaintext: str) -> str:
        try:
            nonce = os.urandom(NONCE_SIZE)
            sealed = self._cipher.encrypt(nonce, plaintext.encode("utf-8"), None)
        except (TypeError, ValueError, OverflowError) as e:
            raise EncryptionError(f"error encrypting message: {e}") from e
        return (nonce + sealed).hex()

    def decrypt(self, ciphertext: str) -> str:
        try:
            raw = bytes.fromhex(ciphertext)
        except (TypeError, ValueError) as e:
            raise DecryptionError("error decoding encrypted message") from e

        if len(raw) <= NONCE_SIZE:
            raise DecryptionError("error decoding encrypted message: too short")

        try:
            opened = self._cipher.decrypt(raw[:NONCE_SIZE], raw[NONCE_SIZE:], None)
        except InvalidTag as e:
            logger.warning(
                "Stored secret failed authentication",
                extra={"error_type": "vault_invalid_tag"},
            )
            raise DecryptionError("error decrypting message") from e

        try:
            return opened.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionError("error decrypting message: invalid utf-8") from e
