"""DTOs for tenant use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from tenantops.domain.enums import TenantStatus


@dataclass(frozen=True)
class TenantDraft:
    """Validated tenant basics ready to insert (slug sanitized, text fields cleaned)."""

    name: str
    slug: str
    timezone: str
    currency: str
    owner_email: str
    contact_email: str | None = None
    phone: str | None = None
    website: str | None = None
    description: str | None = None
    address: dict[str, Any] | None = None


@dataclass(frozen=True)
class TenantResult:
    """Tenant read-model (result of get_by_id, list, reserve, etc.)."""

    id: str
    name: str
    slug: str
    status: TenantStatus
    timezone: str = "UTC"
    currency: str = "USD"
    owner_email: str | None = None
    owner_id: str | None = None
    contact_email: str | None = None
    phone: str | None = None
    website: str | None = None
    description: str | None = None
    address: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class TenantChanges:
    """Partial update of tenant profile fields. None means unchanged."""

    name: str | None = None
    timezone: str | None = None
    currency: str | None = None
    contact_email: str | None = None
    phone: str | None = None
    website: str | None = None
    description: str | None = None
    address: dict[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        return {k: v for k, v in self.__dict__.items() if v is not None}


@dataclass(frozen=True)
class TenantPage:
    """One page of tenants plus the total matching count."""

    items: list[TenantResult] = field(default_factory=list)
    total: int = 0
    skip: int = 0
    limit: int = 50
