"""Username/password credential services."""

from functools import lru_cache

from src.iam.services.database.utils import get_query_builder
from src.iam.services.password.hashing import hash_secret
from src.iam.services.password.schemas import WithPasswordUser
from src.iam.services.password.service import PasswordService
from src.iam.services.password.store import PasswordStore


@lru_cache(maxsize=1)
def get_password_service() -> PasswordService:
    """Get the password service wired to Supabase (singleton pattern)."""
    return PasswordService(PasswordStore(get_query_builder()))


__all__ = [
    "get_password_service",
    "PasswordService",
    "PasswordStore",
    "WithPasswordUser",
    "hash_secret",
]
