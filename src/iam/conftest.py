"""Pytest configuration and shared fixtures."""

import copy
from typing import Any

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from src.iam.auth.models import CallerContext
from src.iam.main import app
from src.iam.services.vault import AESGCMVault


class InMemoryQueryBuilder:
    """
    In-memory stand-in for SupabaseQueryBuilder.

    Implements the subset of methods the stores use, with the same return
    shapes. `unique` maps a table to the column tuple that must be unique,
    and violations raise a PostgREST APIError with code 23505.
    """

    def __init__(self, unique: dict[str, tuple[str, ...]] | None = None) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.unique = unique or {}

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def get_by_field(self, table: str, field: str, value: Any, columns: str = "*"):
        return self.get_one(table, {field: value})

    def get_one(self, table: str, filters: dict[str, Any], columns: str = "*"):
        for row in self.rows(table):
            if all(row.get(k) == v for k, v in filters.items()):
                return copy.deepcopy(row)
        return None

    def list_records(
        self,
        table: str,
        columns: str = "*",
        filters: dict[str, Any] | None = None,
        in_filters: dict[str, list[Any]] | None = None,
        order_by: str | None = None,
        order_desc: bool = True,
    ) -> list[dict[str, Any]]:
        result = []
        for row in self.rows(table):
            if filters and not all(row.get(k) == v for k, v in filters.items()):
                continue
            if in_filters and not all(row.get(k) in v for k, v in in_filters.items()):
                continue
            result.append(copy.deepcopy(row))
        return result

    def insert_record(self, table: str, data: dict[str, Any]) -> dict[str, Any]:
        columns = self.unique.get(table)
        if columns:
            key = tuple(data.get(c) for c in columns)
            if any(tuple(row.get(c) for c in columns) == key for row in self.rows(table)):
                raise APIError(
                    {
                        "message": "duplicate key value violates unique constraint",
                        "code": "23505",
                        "hint": None,
                        "details": None,
                    }
                )
        self.rows(table).append(copy.deepcopy(data))
        return copy.deepcopy(data)

    def update_by_filter(
        self, table: str, filters: dict[str, Any], data: dict[str, Any]
    ) -> list[dict[str, Any]]:
        updated = []
        for row in self.rows(table):
            if all(row.get(k) == v for k, v in filters.items()):
                row.update(copy.deepcopy(data))
                updated.append(copy.deepcopy(row))
        return updated


@pytest.fixture
def client() -> TestClient:
    """
    Provide FastAPI test client for API testing.

    Returns:
        TestClient instance for making API requests

    Example:
        >>> def test_health(client):
        >>>     response = client.get("/health")
        >>>     assert response.status_code == 200
    """
    return TestClient(app)


@pytest.fixture
def fake_db() -> InMemoryQueryBuilder:
    """Provide an empty in-memory document store."""
    return InMemoryQueryBuilder(unique={"with_password_users": ("email", "project_id")})


@pytest.fixture
def vault() -> AESGCMVault:
    """Provide a vault with a fixed test key."""
    return AESGCMVault(b"t" * 32)


@pytest.fixture
def caller() -> CallerContext:
    """Provide a caller authorized for projects P1 and P2."""
    return CallerContext(user_id="user-1", project_ids=["P1", "P2"])
