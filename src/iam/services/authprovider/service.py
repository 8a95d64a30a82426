"""Auth provider orchestration with project scoping."""

import logging

from src.iam.auth.models import CallerContext
from src.iam.exceptions import AuthProviderNotFoundError, ProjectNotFoundError
from src.iam.services.authprovider.base import ServiceProvider
from src.iam.services.authprovider.factory import ProviderFactory
from src.iam.services.authprovider.schemas import AuthProvider
from src.iam.services.authprovider.store import AuthProviderStore

logger = logging.getLogger(__name__)


class AuthProviderService:
    """
    Service for managing auth providers and building their adapters.

    Enforces tenant scoping on top of AuthProviderStore:
    - reads outside the caller's projects look exactly like missing records
      (AuthProviderNotFoundError), so existence is not leaked
    - writes to a project outside the caller's projects raise ProjectNotFoundError

    Example:
        >>> service = AuthProviderService(store, ProviderFactory())
        >>> config = service.get(provider_id, caller)
        >>> adapter = service.get_provider(config)
        >>> url = adapter.get_auth_code_url(state)
    """

    def __init__(self, store: AuthProviderStore, factory: ProviderFactory):
        self.store = store
        self.factory = factory

    def get_all(self, caller: CallerContext) -> list[AuthProvider]:
        """List the providers of every project the caller is authorized for."""
        return self.store.get_all(list(caller.project_ids))

    def get(
        self, provider_id: str, caller: CallerContext, dont_check_projects: bool = False
    ) -> AuthProvider:
        """
        Fetch one provider with decrypted secrets.

        Args:
            provider_id: Provider id
            caller: Caller context
            dont_check_projects: Skip project scoping (login flows resolving
                a provider before any project context exists)

        Raises:
            AuthProviderNotFoundError: If absent or outside the caller's projects
        """
        provider = self.store.get(provider_id)
        if dont_check_projects:
            return provider

        if not caller.has_project(provider.project_id):
            logger.info(
                f"Auth provider {provider_id} is outside the caller's projects",
                extra={"provider_id": provider_id, "user_id": caller.user_id},
            )
            raise AuthProviderNotFoundError()
        return provider

    def create(self, provider: AuthProvider, caller: CallerContext) -> AuthProvider:
        """
        Create a provider in one of the caller's projects.

        Raises:
            ProjectNotFoundError: If provider.project_id is not one of the caller's projects
            EncryptionError: If a secret param cannot be encrypted
        """
        self._check_project(provider.project_id, caller)
        return self.store.create(provider, created_by=caller.user_id)

    def update(self, provider: AuthProvider, caller: CallerContext) -> AuthProvider:
        """
        Update a provider the caller can see, keeping it in one of their projects.

        Raises:
            ProjectNotFoundError: If the target project is not one of the caller's projects
            AuthProviderNotFoundError: If the provider is absent or currently
                belongs to a project outside the caller's projects
            EncryptionError: If a secret param cannot be encrypted
        """
        self._check_project(provider.project_id, caller)
        self.get(provider.id, caller)
        return self.store.update(provider, updated_by=caller.user_id)

    def get_provider(self, config: AuthProvider) -> ServiceProvider:
        """
        Build the adapter for a provider configuration.

        Raises:
            UnknownProviderTypeError: If no adapter is registered for config.provider
        """
        return self.factory.create(config)

    def resolve_provider(self, provider_id: str) -> ServiceProvider:
        """
        Load a provider by id without project scoping and build its adapter.

        Used by login callbacks, which only know the provider id.

        Raises:
            AuthProviderNotFoundError: If no provider has this id
            UnknownProviderTypeError: If no adapter is registered for its type
        """
        return self.get_provider(self.get(provider_id, CallerContext(), dont_check_projects=True))

    @staticmethod
    def _check_project(project_id: str, caller: CallerContext) -> None:
        if not caller.has_project(project_id):
            logger.warning(
                f"Rejected write to project {project_id} outside the caller's projects",
                extra={"project_id": project_id, "user_id": caller.user_id},
            )
            raise ProjectNotFoundError()
