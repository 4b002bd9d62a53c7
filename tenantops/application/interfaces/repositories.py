"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill.
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

from tenantops.domain.enums import TenantStatus

if TYPE_CHECKING:
    from tenantops.application.dtos.identity import AdminUserResult
    from tenantops.application.dtos.provisioning import (
        LedgerEntry,
        ProvisioningRequest,
        Reservation,
    )
    from tenantops.application.dtos.setup_link import (
        NewSetupLink,
        RateLimitPolicy,
        RateLimitSnapshot,
        SetupLinkRecord,
    )
    from tenantops.application.dtos.tenant import TenantChanges, TenantPage, TenantResult


class ITenantRepository(Protocol):
    """Protocol for tenant reads and admin updates."""

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        """Return tenant by id, or None."""

    async def list_tenants(
        self, skip: int = 0, limit: int = 50, status: TenantStatus | None = None
    ) -> TenantPage:
        """Return a page of tenants (newest first), optionally filtered by status."""

    async def find_live_by_owner_email(self, email: str) -> TenantResult | None:
        """Return the non-archived tenant whose owner email is email, or None."""

    async def slug_in_use(self, slug: str) -> bool:
        """True when a non-archived tenant already uses slug."""

    async def update_profile(
        self, tenant_id: str, changes: TenantChanges
    ) -> TenantResult | None:
        """Apply profile changes; return updated tenant or None if missing."""

    async def update_status(
        self, tenant_id: str, status: TenantStatus
    ) -> TenantResult | None:
        """Set tenant status; return updated tenant or None if missing."""

    async def update_owner_email(self, tenant_id: str, email: str) -> TenantResult | None:
        """Set owner email (raises EmailUnavailableException on conflict)."""


class IProvisioningStore(Protocol):
    """Protocol for the provisioning ledger and its atomic tenant reservation."""

    async def get_by_idempotency_key(self, idempotency_key: str) -> LedgerEntry | None:
        """Return the non-failed ledger entry for the key, or None."""

    async def reserve(
        self, request: ProvisioningRequest, claim_ttl_seconds: int
    ) -> Reservation:
        """Atomically create (or resume/replay) ledger entry and tenant row."""

    async def complete(
        self, ledger_id: str, claim_token: str, owner_id: str
    ) -> TenantResult:
        """Bind owner to tenant, activate tenant, mark ledger completed (idempotent)."""

    async def release(self, ledger_id: str, claim_token: str, error: str) -> None:
        """Drop the claim after a retryable failure; entry stays pending."""

    async def fail(self, ledger_id: str, claim_token: str, error: str) -> None:
        """Mark entry failed and archive its tenant (permanent failure)."""


class ISetupLinkStore(Protocol):
    """Protocol for password-setup link persistence and issuance counters."""

    async def record_issue(
        self, link: NewSetupLink, policy: RateLimitPolicy
    ) -> RateLimitSnapshot:
        """Count recent issues and persist link unless a limit is reached.

        Returns a snapshot with limited=True (and nothing written) when over a limit.
        """

    async def get_by_token_hash(self, token_hash: str) -> SetupLinkRecord | None:
        """Return link by token hash, or None."""

    async def mark_used(self, link_id: str, used_at: datetime) -> bool:
        """Set used if not already used; True only for the caller that flipped it."""


class IAdminUserRepository(Protocol):
    """Protocol for platform administrator lookups."""

    async def get_active_by_user_id(self, user_id: str) -> AdminUserResult | None:
        """Return active admin row for identity user_id, or None."""
