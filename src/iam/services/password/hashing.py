"""Deterministic one-way hashing of password secrets."""

import base64
import hashlib


def hash_secret(secret: str) -> str:
    """
    Hash a secret with SHA-256 and encode it as base64.

    Deterministic, so the hash can be used as a lookup key together with
    email and project.

    Raises:
        ValueError: If the secret is empty
    """
    if not secret:
        raise ValueError("secret cannot be empty")
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")
