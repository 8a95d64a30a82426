"""Username/password signup, login and password rotation."""

import logging

from src.iam.exceptions import UserNotFoundError
from src.iam.services.password.hashing import hash_secret
from src.iam.services.password.schemas import WithPasswordUser
from src.iam.services.password.store import PasswordStore

logger = logging.getLogger(__name__)


class PasswordService:
    """
    Password accounts scoped by project.

    Login failures are uniform: an unknown email, a wrong project and a wrong
    password all raise UserNotFoundError with the same message.
    """

    def __init__(self, store: PasswordStore):
        self.store = store

    def signup(self, email: str, password: str, project_id: str) -> None:
        """
        Register a new account.

        Raises:
            ValueError: If the password is empty
            UserAlreadyExistsError: If the email is already registered in the project
        """
        self.store.create_user(email, project_id, hash_secret(password))

    def login(self, email: str, password: str, project_id: str) -> WithPasswordUser:
        """
        Authenticate and return the user with its password field cleared.

        Raises:
            UserNotFoundError: If email, project or password do not match
        """
        if not password:
            raise UserNotFoundError()

        user = self.store.get_user(email, project_id, hash_secret(password))
        return user.model_copy(update={"password": ""})

    def update_password(
        self, email: str, project_id: str, old_password: str, new_password: str
    ) -> None:
        """
        Rotate the password after re-authenticating with the old one.

        Raises:
            UserNotFoundError: If the old credentials do not match, or the
                password changed concurrently; the stored hash is left unchanged
            ValueError: If the new password is empty
        """
        new_hash = hash_secret(new_password)
        self.login(email, old_password, project_id)

        self.store.update_password(email, project_id, hash_secret(old_password), new_hash)
        logger.info(
            "Password updated",
            extra={"project_id": project_id},
        )
