"""Database connection and query helpers."""

from src.iam.services.database.connection import get_supabase_admin_client, get_supabase_client
from src.iam.services.database.utils import (
    SupabaseQueryBuilder,
    get_query_builder,
    is_unique_violation,
)

__all__ = [
    "get_supabase_client",
    "get_supabase_admin_client",
    "SupabaseQueryBuilder",
    "get_query_builder",
    "is_unique_violation",
]
