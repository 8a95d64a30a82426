"""Abstract base class for credential vaults."""

from abc import ABC, abstractmethod


class CredentialVault(ABC):
    """
    Encrypt/decrypt capability consumed by the stores.

    Implementations own key management and the cipher. Stores only rely on
    the round-trip law decrypt(encrypt(x)) == x.
    """

    @abstractmethod
    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt a secret for storage.

        Args:
            plaintext: Secret value

        Returns:
            Ciphertext safe to persist as a string

        Raises:
            EncryptionError: If the secret cannot be encrypted
        """
        pass

    @abstractmethod
    def decrypt(self, ciphertext: str) -> str:
        """
        Decrypt a stored secret.

        Args:
            ciphertext: Value produced by encrypt()

        Returns:
            Original plaintext

        Raises:
            DecryptionError: If the value is malformed or fails authentication
        """
        pass
