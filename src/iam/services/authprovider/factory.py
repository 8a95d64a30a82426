"""Provider factory mapping a provider type to its adapter."""

import logging
from collections.abc import Mapping

import httpx

from src.iam.exceptions import UnknownProviderTypeError
from src.iam.services.authprovider.base import ServiceProvider
from src.iam.services.authprovider.google import GoogleAuthProvider
from src.iam.services.authprovider.oidc import OIDCAuthProvider
from src.iam.services.authprovider.schemas import AuthProvider, AuthProviderType

logger = logging.getLogger(__name__)

DEFAULT_PROVIDERS: Mapping[AuthProviderType, type[ServiceProvider]] = {
    AuthProviderType.GOOGLE: GoogleAuthProvider,
    AuthProviderType.OIDC: OIDCAuthProvider,
}


class ProviderFactory:
    """
    Builds ServiceProvider adapters from stored configuration.

    The adapter map is owned by the factory instance and injected into
    AuthProviderService, so tests and deployments can register their own.

    Example:
        >>> factory = ProviderFactory()
        >>> adapter = factory.create(config)  # GoogleAuthProvider for GOOGLE
    """

    def __init__(
        self,
        providers: Mapping[AuthProviderType, type[ServiceProvider]] | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize provider factory.

        Args:
            providers: Adapter classes by provider type (default: Google and OIDC)
            http_client: Shared HTTP client handed to every adapter
            timeout: Per-call timeout handed to every adapter
        """
        self._providers = dict(DEFAULT_PROVIDERS if providers is None else providers)
        self._http_client = http_client
        self._timeout = timeout

    @property
    def supported_types(self) -> list[AuthProviderType]:
        return list(self._providers)

    def create(self, config: AuthProvider) -> ServiceProvider:
        """
        Build the adapter for `config.provider`.

        Raises:
            UnknownProviderTypeError: If no adapter is registered for the type
        """
        provider_class = self._providers.get(config.provider)
        if provider_class is None:
            logger.warning(
                f"No adapter registered for provider type {config.provider}",
                extra={"provider_id": config.id, "provider_type": str(config.provider)},
            )
            raise UnknownProviderTypeError(str(getattr(config.provider, "value", config.provider)))

        return provider_class(config, http_client=self._http_client, timeout=self._timeout)
