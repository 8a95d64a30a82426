"""Persistence of auth provider configuration with field-level encryption."""

import logging
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from src.iam.config import settings
from src.iam.exceptions import (
    AuthProviderNotFoundError,
    DecryptionError,
    EncryptionError,
    VaultError,
)
from src.iam.services.authprovider.schemas import AuthProvider, AuthProviderParam
from src.iam.services.database.utils import SupabaseQueryBuilder
from src.iam.services.vault.base import CredentialVault

logger = logging.getLogger(__name__)


class AuthProviderStore:
    """
    Reads and writes auth provider documents.

    Secret params are encrypted with the vault before every insert/update and
    decrypted after every read. Any vault failure aborts the whole operation:
    transformation works on copies, so nothing partially encrypted is written
    and nothing partially decrypted is returned.

    Project scoping is not enforced here, see AuthProviderService.
    """

    # Columns written by update(); created_at/created_by are never part of it
    MUTABLE_FIELDS = (
        "name",
        "icon",
        "provider",
        "params",
        "project_id",
        "enabled",
        "updated_at",
        "updated_by",
    )

    def __init__(
        self,
        vault: CredentialVault,
        db: SupabaseQueryBuilder,
        table: str | None = None,
    ):
        """
        Initialize auth provider store.

        Args:
            vault: Credential vault for secret params
            db: Query builder for the document store
            table: Table name (default: settings.auth_providers_table)
        """
        self.vault = vault
        self.db = db
        self.table = table or settings.auth_providers_table

    def get(self, provider_id: str) -> AuthProvider:
        """
        Fetch one provider with secrets decrypted.

        Raises:
            AuthProviderNotFoundError: If no provider has this id
            DecryptionError: If any secret param cannot be decrypted
        """
        record = self.db.get_by_field(self.table, "id", provider_id)
        if record is None:
            raise AuthProviderNotFoundError()
        return self._from_record(record)

    def get_all(self, project_ids: list[str] | None = None) -> list[AuthProvider]:
        """
        List providers with secrets decrypted.

        Args:
            project_ids: Restrict to these projects. None lists every project;
                an empty list matches nothing.

        Raises:
            DecryptionError: If a secret param of any returned provider cannot be decrypted
        """
        if project_ids is not None and not project_ids:
            return []

        in_filters = {"project_id": project_ids} if project_ids else None
        records = self.db.list_records(self.table, in_filters=in_filters, order_by="created_at")
        return [self._from_record(record) for record in records]

    def create(self, provider: AuthProvider, created_by: str = "") -> AuthProvider:
        """
        Insert a new provider.

        Generates the id, forces enabled=True and stamps created_at/created_by.
        The input model is not modified.

        Returns:
            The created provider with plaintext params

        Raises:
            EncryptionError: If any secret param cannot be encrypted
        """
        created = provider.model_copy(
            update={
                "id": str(uuid4()),
                "enabled": True,
                "created_at": datetime.now(UTC),
                "created_by": created_by,
                "updated_at": None,
                "updated_by": "",
            }
        )

        document = created.model_dump(mode="json")
        document["params"] = self._encrypt_params(created.params)

        self.db.insert_record(self.table, document)
        logger.info(
            f"Created auth provider {created.id}",
            extra={"provider_id": created.id, "project_id": created.project_id},
        )
        return created

    def update(self, provider: AuthProvider, updated_by: str = "") -> AuthProvider:
        """
        Update the mutable fields of an existing provider.

        A single UPDATE sets only MUTABLE_FIELDS, so created_at/created_by are
        preserved whatever the caller supplies and no read-then-write window
        exists.

        Returns:
            The stored provider with plaintext params

        Raises:
            AuthProviderNotFoundError: If the id is empty or matches nothing
            EncryptionError: If any secret param cannot be encrypted
        """
        if not provider.id:
            raise AuthProviderNotFoundError()

        changes = provider.model_copy(
            update={"updated_at": datetime.now(UTC), "updated_by": updated_by}
        ).model_dump(mode="json", include=set(self.MUTABLE_FIELDS))
        changes["params"] = self._encrypt_params(provider.params)

        rows = self.db.update_by_filter(self.table, {"id": provider.id}, changes)
        if not rows:
            raise AuthProviderNotFoundError()

        logger.info(
            f"Updated auth provider {provider.id}",
            extra={"provider_id": provider.id, "project_id": provider.project_id},
        )
        return self._from_record(rows[0])

    def _encrypt_params(self, params: list[AuthProviderParam]) -> list[dict[str, Any]]:
        encrypted = []
        for index, param in enumerate(params):
            document = param.model_dump(mode="json")
            if param.is_secret:
                try:
                    document["value"] = self.vault.encrypt(param.value)
                except VaultError as e:
                    logger.error(
                        f"Failed to encrypt auth provider secret at {index}",
                        extra={"error_type": "secret_encryption_failed", "param_key": param.key},
                    )
                    raise EncryptionError(
                        f"error encrypting auth provider secret at {index}: {e}"
                    ) from e
            encrypted.append(document)
        return encrypted

    def _from_record(self, record: dict[str, Any]) -> AuthProvider:
        provider = AuthProvider.model_validate(record)

        params = []
        for index, param in enumerate(provider.params):
            if param.is_secret:
                try:
                    param = param.model_copy(update={"value": self.vault.decrypt(param.value)})
                except VaultError as e:
                    logger.error(
                        f"Failed to decrypt auth provider secret at {index}",
                        extra={
                            "error_type": "secret_decryption_failed",
                            "provider_id": provider.id,
                            "param_key": param.key,
                        },
                    )
                    raise DecryptionError(
                        f"error decrypting auth provider secret at {index}: {e}"
                    ) from e
            params.append(param)

        return provider.model_copy(update={"params": params})
