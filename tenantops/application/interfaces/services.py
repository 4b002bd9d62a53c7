"""Service interfaces (ports) for external systems: identity provider and email."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from tenantops.domain.enums import SetupLinkMode

if TYPE_CHECKING:
    from tenantops.application.dtos.identity import IdentityUser


class IIdentityProvider(Protocol):
    """Protocol for the identity provider's admin API.

    Implementations raise IdentityProviderError subclasses:
    IdentityConflictError when an identity with the email already exists,
    IdentityProviderUnavailableError for transient failures.
    """

    async def create_user(
        self,
        user_id: str,
        email: str,
        password: str,
        metadata: dict[str, Any],
    ) -> IdentityUser:
        """Create a confirmed user with the given id, email, password and metadata."""

    async def get_user(self, user_id: str) -> IdentityUser | None:
        """Return user by id, or None if it does not exist."""

    async def find_user_by_email(self, email: str) -> IdentityUser | None:
        """Return user with this (normalized) email, or None."""

    async def update_user(
        self,
        user_id: str,
        *,
        email: str | None = None,
        password: str | None = None,
    ) -> IdentityUser:
        """Update email and/or password of an existing user."""

    async def generate_link(
        self, mode: SetupLinkMode, email: str, redirect_to: str
    ) -> str:
        """Return an action link (invite or recovery) for email."""

    async def get_user_for_token(self, access_token: str) -> IdentityUser | None:
        """Return the user an access token belongs to, or None if invalid."""


class IEmailSender(Protocol):
    """Protocol for outbound transactional email."""

    async def send_setup_link(
        self,
        *,
        to: str,
        tenant_name: str,
        link: str,
        mode: SetupLinkMode,
        expires_at: datetime,
    ) -> None:
        """Send a password-setup link (raises EmailDeliveryError on failure)."""
