"""FastAPI application entry point for the connector webhook."""

import logging
import os
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from github_connector.auth.token_validator import TokenValidator
from github_connector.config import get_settings
from github_connector.graph.client import GraphClient
from github_connector.graph.connections import ConnectionRegistryClient
from github_connector.services.notification_dispatcher import NotificationDispatcher

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown."""
    # Startup: fails fast when settings are missing
    settings = get_settings()

    graph = GraphClient.from_settings(settings)
    registry = ConnectionRegistryClient(graph, settings.github_owner, settings.github_repo)
    validator = TokenValidator(settings.client_id, settings.tenant_id, jwks_uri=settings.jwks_uri)
    app.state.dispatcher = NotificationDispatcher(validator, registry)
    logger.info(f"Listening for connector notifications for {settings.github_owner}/{settings.github_repo}")

    yield

    # Shutdown
    await graph.aclose()


app = FastAPI(
    title="GitHub Connector",
    description="Receives Microsoft Graph connector notifications for the GitHub connector",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Import and include routers after app is created to avoid circular imports
from github_connector.api import notifications  # noqa: E402

app.include_router(notifications.router)
