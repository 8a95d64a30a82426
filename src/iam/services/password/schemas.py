"""Pydantic models for username/password accounts."""

from datetime import datetime

from pydantic import BaseModel


class WithPasswordUser(BaseModel):
    """
    Password account scoped to a project.

    `password` only ever holds the one-way hash, and PasswordService clears it
    before a user is returned to a caller.
    """

    id: str = ""
    project_id: str
    email: str
    password: str = ""
    created_at: datetime | None = None
    created_by: str = ""
    updated_at: datetime | None = None
    updated_by: str = ""
