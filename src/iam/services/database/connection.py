"""Supabase database connection management."""

from functools import lru_cache

from supabase import Client, create_client

from src.iam.config import settings


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """
    Get Supabase client instance with anon key (singleton pattern).

    Use this for operations that should respect RLS policies.
    Provider configuration and password records are server-side data, so the
    stores use get_supabase_admin_client() instead.

    Returns:
        Configured Supabase client with anon key for RLS-protected operations
    """
    return create_client(settings.supabase_url, settings.supabase_anon_key)


@lru_cache(maxsize=1)
def get_supabase_admin_client() -> Client:
    """
    Get Supabase admin client with service role key (singleton pattern).

    This client bypasses Row-Level Security (RLS) policies. Tenant scoping of
    auth providers is enforced by AuthProviderService instead.

    Returns:
        Configured Supabase client with service role key (bypasses RLS)
    """
    return create_client(settings.supabase_url, settings.supabase_service_role_key)
