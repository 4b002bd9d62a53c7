"""Tenant ORM model. One row per restaurant tenant."""

from typing import Any

from sqlalchemy import JSON, CheckConstraint, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from tenantops.domain.enums import TenantStatus
from tenantops.infrastructure.persistence.database import Base
from tenantops.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
    enum_check,
)

# Partial unique indexes: archived (soft-disabled) tenants release slug and owner email.
TENANT_SLUG_UNIQUE_INDEX = "uq_tenant_slug_live"
TENANT_OWNER_EMAIL_UNIQUE_INDEX = "uq_tenant_owner_email_live"


class Tenant(CuidMixin, TimestampMixin, Base):
    """Restaurant tenant. Status: pending, active, suspended, archived.

    owner_email is stored normalized (lowercase); owner_id is the identity
    provider user id and stays NULL until provisioning completes.
    """

    __tablename__ = "tenant"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(50), nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="UTC")
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    contact_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    website: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    address: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    owner_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    owner_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=TenantStatus.PENDING.value, index=True
    )

    __table_args__ = (
        CheckConstraint(
            enum_check("status", TenantStatus.values()),
            name="tenant_status_check",
        ),
        CheckConstraint(
            "owner_email IS NULL OR owner_email = lower(owner_email)",
            name="tenant_owner_email_lower_check",
        ),
        Index(
            TENANT_SLUG_UNIQUE_INDEX,
            "slug",
            unique=True,
            postgresql_where=text("status <> 'archived'"),
        ),
        Index(
            TENANT_OWNER_EMAIL_UNIQUE_INDEX,
            "owner_email",
            unique=True,
            postgresql_where=text("status <> 'archived' AND owner_email IS NOT NULL"),
        ),
    )
