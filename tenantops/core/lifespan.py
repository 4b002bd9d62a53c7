"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring (shared HTTP client, telemetry,
DB engine dispose). No business logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from tenantops.core.config import get_settings
from tenantops.infrastructure.persistence.database import dispose_engine, get_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: shared HTTP client for identity provider and email calls,
    telemetry (if enabled). Shutdown: HTTP client close, telemetry
    shutdown, SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    app.state.http_client = httpx.AsyncClient(timeout=settings.identity_timeout_seconds)
    app.state.telemetry = None
    if settings.telemetry_enabled:
        from tenantops.shared.telemetry import TelemetryConfig

        telemetry = TelemetryConfig.from_settings(settings)
        if telemetry.start(app, get_engine()):
            app.state.telemetry = telemetry

    yield

    # ---- Shutdown ----
    await app.state.http_client.aclose()
    app.state.http_client = None
    logger.info("Shared HTTP client closed")

    if app.state.telemetry is not None:
        app.state.telemetry.shutdown()
        app.state.telemetry = None
        logger.info("Telemetry shutdown complete")

    await dispose_engine()
