"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import BaseModel

from src.iam.config import settings
from src.iam.services.authprovider import DEFAULT_PROVIDERS
from src.iam.services.vault import get_vault

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup and shutdown)."""
    # Startup: fail fast on a bad ENCRYPTION_KEY instead of on the first request
    try:
        get_vault()
        logger.info(
            "Credential vault initialized",
            extra={"provider_types": [t.value for t in DEFAULT_PROVIDERS]},
        )
    except ValueError as e:
        logger.error(
            f"Failed to initialize credential vault: {e}",
            extra={"error_type": "vault_init_failed"},
        )
        raise

    yield

    # Shutdown
    get_vault.cache_clear()
    logger.info("Credential vault released")


app = FastAPI(
    title="IAM Auth Providers",
    description="External identity providers and encrypted provider configuration",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str


@app.get("/health", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Health check endpoint."""
    return HealthCheckResponse(status="healthy")
