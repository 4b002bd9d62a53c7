"""Identity provider and email sender dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

import httpx
from fastapi import Depends, Request

from tenantops.application.interfaces.services import IEmailSender, IIdentityProvider
from tenantops.core.config import get_settings
from tenantops.infrastructure.email import DisabledEmailSender, ResendEmailSender
from tenantops.infrastructure.identity import GoTrueIdentityProvider


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared outbound HTTP client created in the app lifespan."""
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        raise RuntimeError("Shared HTTP client is not initialized (lifespan not running)")
    return client


def get_identity_provider(
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> IIdentityProvider:
    settings = get_settings()
    return GoTrueIdentityProvider(
        client,
        settings.identity_provider_url,
        settings.identity_service_key.get_secret_value(),
        timeout_seconds=settings.identity_timeout_seconds,
        lookup_max_pages=settings.identity_lookup_max_pages,
    )


def get_email_sender(
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> IEmailSender:
    """Resend sender when an API key is configured; otherwise a sender that always fails."""
    settings = get_settings()
    if settings.email_api_key is None or not settings.email_api_key.get_secret_value():
        return DisabledEmailSender()
    return ResendEmailSender(
        client,
        settings.email_api_url,
        settings.email_api_key.get_secret_value(),
        settings.email_from_address,
        timeout_seconds=settings.email_timeout_seconds,
    )
