"""Persistence of password accounts."""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from postgrest.exceptions import APIError

from src.iam.config import settings
from src.iam.exceptions import UserAlreadyExistsError, UserNotFoundError
from src.iam.services.database.utils import SupabaseQueryBuilder, is_unique_violation
from src.iam.services.password.schemas import WithPasswordUser

logger = logging.getLogger(__name__)


class PasswordStore:
    """
    Reads and writes with_password_users records.

    All methods take already-hashed passwords; hashing is PasswordService's job.
    The table is expected to carry a unique constraint on (email, project_id).
    """

    def __init__(self, db: SupabaseQueryBuilder, table: str | None = None):
        self.db = db
        self.table = table or settings.password_users_table

    def get_user(self, email: str, project_id: str, password_hash: str) -> WithPasswordUser:
        """
        Fetch the user matching email, project and password hash.

        Raises:
            UserNotFoundError: If any of the three does not match
        """
        record = self.db.get_one(
            self.table,
            {"email": email, "project_id": project_id, "password": password_hash},
        )
        if record is None:
            raise UserNotFoundError()
        return WithPasswordUser.model_validate(record)

    def create_user(self, email: str, project_id: str, password_hash: str) -> WithPasswordUser:
        """
        Insert a new user.

        Raises:
            UserAlreadyExistsError: If (email, project_id) is already registered
        """
        now = datetime.now(UTC)
        user = WithPasswordUser(
            id=str(uuid4()),
            project_id=project_id,
            email=email,
            password=password_hash,
            created_at=now,
            created_by=settings.system_user,
            updated_at=now,
            updated_by=settings.system_user,
        )

        try:
            self.db.insert_record(self.table, user.model_dump(mode="json"))
        except APIError as e:
            if is_unique_violation(e):
                raise UserAlreadyExistsError() from e
            raise

        logger.info(
            f"Created password user {user.id}",
            extra={"user_id": user.id, "project_id": project_id},
        )
        return user

    def update_password(
        self, email: str, project_id: str, old_password_hash: str, new_password_hash: str
    ) -> None:
        """
        Replace the password hash if the stored hash still equals the old one.

        Filter and write run as one UPDATE, so a concurrent rotation between
        the caller's check and this write is detected instead of overwritten.

        Raises:
            UserNotFoundError: If no row matched email, project and old hash
        """
        rows = self.db.update_by_filter(
            self.table,
            {"email": email, "project_id": project_id, "password": old_password_hash},
            {
                "password": new_password_hash,
                "updated_at": datetime.now(UTC).isoformat(),
                "updated_by": settings.system_user,
            },
        )
        if not rows:
            raise UserNotFoundError()
