"""Generic database utility functions for Supabase interactions."""

import logging
from typing import Any

from postgrest.exceptions import APIError
from supabase import Client

from src.iam.services.database.connection import get_supabase_admin_client, get_supabase_client

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: Exception) -> bool:
    """Return True if `error` is a PostgREST error caused by a unique constraint."""
    return isinstance(error, APIError) and error.code == UNIQUE_VIOLATION


class SupabaseQueryBuilder:
    """Helper class for building and executing Supabase queries."""

    def __init__(self, client: Client | None = None) -> None:
        """
        Initialize query builder.

        Args:
            client: Supabase client instance (uses default if None)
        """
        self.client = client or get_supabase_client()

    def get_by_field(
        self, table: str, field: str, value: Any, columns: str = "*"
    ) -> dict[str, Any] | None:
        """
        Fetch a single record by field value.

        Args:
            table: Table name
            field: Field name to filter by
            value: Field value
            columns: Columns to select (default: "*")

        Returns:
            First matching record or None

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> provider = builder.get_by_field("auth_providers", "id", provider_id)
        """
        return self.get_one(table, {field: value}, columns=columns)

    def get_one(
        self, table: str, filters: dict[str, Any], columns: str = "*"
    ) -> dict[str, Any] | None:
        """
        Fetch the first record matching all filters.

        Args:
            table: Table name
            filters: Dictionary of field:value pairs, combined with AND
            columns: Columns to select (default: "*")

        Returns:
            First matching record or None

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> user = builder.get_one(
            ...     "with_password_users",
            ...     {"email": "a@b.com", "project_id": "p1", "password": hashed},
            ... )
        """
        query = self.client.table(table).select(columns)

        for field, value in filters.items():
            query = query.eq(field, value)

        response = query.limit(1).execute()
        return response.data[0] if response.data else None

    def list_records(
        self,
        table: str,
        columns: str = "*",
        filters: dict[str, Any] | None = None,
        in_filters: dict[str, list[Any]] | None = None,
        order_by: str | None = None,
        order_desc: bool = True,
    ) -> list[dict[str, Any]]:
        """
        List records with optional filtering and ordering.

        Args:
            table: Table name
            columns: Columns to select (default: "*")
            filters: Dictionary of field:value equality filters
            in_filters: Dictionary of field:[values] membership filters
            order_by: Column to order by
            order_desc: Order descending (default: True)

        Returns:
            List of record dictionaries

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> providers = builder.list_records(
            ...     "auth_providers",
            ...     in_filters={"project_id": ["p1", "p2"]},
            ...     order_by="created_at",
            ... )
        """
        query = self.client.table(table).select(columns)

        if filters:
            for field, value in filters.items():
                query = query.eq(field, value)

        if in_filters:
            for field, values in in_filters.items():
                query = query.in_(field, values)

        if order_by:
            query = query.order(order_by, desc=order_desc)

        response = query.execute()
        return response.data

    def insert_record(self, table: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """
        Insert a single record.

        Args:
            table: Table name
            data: Record data dictionary

        Returns:
            Inserted record dictionary or None if failed

        Raises:
            postgrest.exceptions.APIError: If insert operation fails (including
                unique constraint violations, see is_unique_violation)
        """
        try:
            response = self.client.table(table).insert(data).execute()
        except APIError as e:
            logger.error(
                f"Failed to insert record in {table}: {e.message}",
                extra={"table": table, "code": e.code},
            )
            raise
        return response.data[0] if response.data else None

    def update_by_filter(
        self, table: str, filters: dict[str, Any], data: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """
        Update records matching filters.

        The filter and the write run as a single UPDATE statement, so callers
        can use the filter as a precondition (compare-and-set).

        Args:
            table: Table name
            filters: Dictionary of field:value pairs for filtering
            data: Fields to update

        Returns:
            List of updated record dictionaries (empty if nothing matched)

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> updated = builder.update_by_filter(
            ...     "with_password_users",
            ...     {"email": email, "project_id": project_id, "password": old_hash},
            ...     {"password": new_hash},
            ... )
        """
        query = self.client.table(table).update(data)

        for field, value in filters.items():
            query = query.eq(field, value)

        response = query.execute()
        return response.data


def get_query_builder(client: Client | None = None, use_admin: bool = True) -> SupabaseQueryBuilder:
    """
    Get instance of SupabaseQueryBuilder.

    Args:
        client: Optional Supabase client (uses default if None)
        use_admin: If True (default), uses admin client that bypasses RLS.
                   Set to False for operations that should respect RLS policies.

    Returns:
        SupabaseQueryBuilder instance
    """
    if client is None:
        client = get_supabase_admin_client() if use_admin else get_supabase_client()
    return SupabaseQueryBuilder(client)
