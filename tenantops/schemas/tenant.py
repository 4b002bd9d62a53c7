"""Tenant administration API schemas."""

from datetime import datetime
from typing import Any

from pydantic import EmailStr, Field

from tenantops.application.dtos.tenant import TenantChanges, TenantResult
from tenantops.domain.enums import TenantStatus
from tenantops.schemas.common import CamelModel


class TenantResponse(CamelModel):
    """Tenant in list/get responses."""

    id: str
    name: str
    slug: str
    status: TenantStatus
    timezone: str
    currency: str
    owner_email: str | None = None
    owner_id: str | None = None
    contact_email: str | None = None
    phone: str | None = None
    website: str | None = None
    description: str | None = None
    address: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_result(cls, t: TenantResult) -> "TenantResponse":
        return cls(
            id=t.id,
            name=t.name,
            slug=t.slug,
            status=t.status,
            timezone=t.timezone,
            currency=t.currency,
            owner_email=t.owner_email,
            owner_id=t.owner_id,
            contact_email=t.contact_email,
            phone=t.phone,
            website=t.website,
            description=t.description,
            address=t.address,
            created_at=t.created_at,
            updated_at=t.updated_at,
        )


class TenantListResponse(CamelModel):
    items: list[TenantResponse]
    total: int
    skip: int
    limit: int


class TenantUpdate(CamelModel):
    """Request body for PATCH /tenants/{id} (partial). Slug and owner are not editable here."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    timezone: str | None = Field(default=None, max_length=64)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    contact_email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    website: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    address: dict[str, Any] | None = None

    def to_changes(self) -> TenantChanges:
        return TenantChanges(**self.model_dump(exclude_none=True))


class TenantStatusUpdate(CamelModel):
    """Request body for PATCH /tenants/{id}/status."""

    status: TenantStatus


class SlugAvailabilityResponse(CamelModel):
    slug: str
    available: bool
    reason: str | None = None
