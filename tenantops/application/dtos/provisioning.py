"""DTOs for the provisioning workflow (request, ledger, reservation, result)."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from tenantops.application.dtos.tenant import TenantDraft, TenantResult
from tenantops.domain.enums import LedgerStatus, ReservationOutcome


@dataclass(frozen=True)
class EmailAvailability:
    """Result of the owner-email availability check."""

    email: str
    available: bool
    reason: str | None = None
    conflicting_tenant_id: str | None = None


@dataclass(frozen=True)
class ProvisioningRequest:
    """Everything the reservation transaction needs for one provisioning attempt."""

    idempotency_key: str
    admin_user_id: str
    tenant: TenantDraft
    owner_name: str | None = None
    request_id: str | None = None


@dataclass(frozen=True)
class LedgerEntry:
    """Provisioning ledger read-model."""

    id: str
    idempotency_key: str
    admin_user_id: str
    requested_slug: str
    owner_email: str
    status: LedgerStatus
    planned_owner_id: str
    tenant_id: str | None = None
    owner_id: str | None = None
    attempts: int = 0
    last_error: str | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None

    def matches(self, request: ProvisioningRequest) -> bool:
        """True when the request targets the same slug and owner email."""
        return (
            self.requested_slug == request.tenant.slug
            and self.owner_email == request.tenant.owner_email
        )


@dataclass(frozen=True)
class Reservation:
    """Outcome of the reservation transaction.

    claim_token is set for CREATED and RESUMED (caller holds the lease) and
    None for REPLAYED.
    """

    outcome: ReservationOutcome
    ledger: LedgerEntry
    tenant: TenantResult
    claim_token: str | None = None


@dataclass(frozen=True)
class ProvisioningResult:
    """What the provisioning endpoint returns. password is None on replay."""

    tenant_id: str
    slug: str
    owner_id: str
    owner_email: str
    password: str | None
    replayed: bool
    idempotency_key: str


@dataclass(frozen=True)
class ProvisionTenantCommand:
    """Raw provisioning input as received from the API (not yet sanitized)."""

    name: str
    slug: str
    timezone: str
    currency: str
    owner_email: str | None
    owner_name: str | None = None
    contact_email: str | None = None
    phone: str | None = None
    website: str | None = None
    description: str | None = None
    address: dict[str, Any] | None = None
    idempotency_key: str | None = None
