"""Tenant provisioning API schemas."""

from datetime import datetime
from typing import Any

from pydantic import EmailStr, Field

from tenantops.application.dtos.provisioning import LedgerEntry, ProvisionTenantCommand
from tenantops.domain.enums import LedgerStatus
from tenantops.schemas.common import CamelModel


class TenantBasics(CamelModel):
    """Restaurant basics. Slug is sanitized and validated server-side."""

    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    timezone: str = Field(default="UTC", max_length=64)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    email: EmailStr | None = Field(default=None, description="Public contact email")
    phone: str | None = Field(default=None, max_length=50)
    website: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    address: dict[str, Any] | None = None


class OwnerInput(CamelModel):
    # email may be blank here; the service answers OWNER_EMAIL_REQUIRED
    email: str | None = Field(default=None, max_length=255)
    name: str | None = Field(default=None, max_length=255)


class ProvisionTenantRequest(CamelModel):
    """Request body for POST /tenants/provision.

    idempotencyKey is optional; supply it to make retries safe.
    """

    basics: TenantBasics
    owner: OwnerInput = Field(default_factory=OwnerInput)
    idempotency_key: str | None = Field(default=None, min_length=1, max_length=128)

    def to_command(self) -> ProvisionTenantCommand:
        return ProvisionTenantCommand(
            name=self.basics.name,
            slug=self.basics.slug,
            timezone=self.basics.timezone,
            currency=self.basics.currency,
            owner_email=self.owner.email,
            owner_name=self.owner.name,
            contact_email=self.basics.email,
            phone=self.basics.phone,
            website=self.basics.website,
            description=self.basics.description,
            address=self.basics.address,
            idempotency_key=self.idempotency_key,
        )


class OwnerCredentials(CamelModel):
    """Owner login. password is null when the request was a replay."""

    email: str
    password: str | None
    temporary_password: bool = True


class ProvisionedTenant(CamelModel):
    tenant_id: str
    slug: str
    owner_id: str
    replayed: bool
    idempotency_key: str
    owner_credentials: OwnerCredentials


class ProvisionTenantResponse(CamelModel):
    """Success envelope for POST /tenants/provision."""

    success: bool = True
    data: ProvisionedTenant
    request_id: str | None = None


class ProvisioningStatusResponse(CamelModel):
    """Ledger state for GET /tenants/provisioning/{idempotencyKey}."""

    idempotency_key: str
    status: LedgerStatus
    requested_slug: str
    owner_email: str
    tenant_id: str | None = None
    owner_id: str | None = None
    attempts: int
    last_error: str | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def from_entry(cls, entry: LedgerEntry) -> "ProvisioningStatusResponse":
        return cls(
            idempotency_key=entry.idempotency_key,
            status=entry.status,
            requested_slug=entry.requested_slug,
            owner_email=entry.owner_email,
            tenant_id=entry.tenant_id,
            owner_id=entry.owner_id,
            attempts=entry.attempts,
            last_error=entry.last_error,
            created_at=entry.created_at,
            completed_at=entry.completed_at,
        )
