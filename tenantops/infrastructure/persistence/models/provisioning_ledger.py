"""Provisioning ledger ORM model: one row per idempotent provisioning attempt."""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from tenantops.domain.enums import LedgerStatus
from tenantops.infrastructure.persistence.database import Base
from tenantops.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
    enum_check,
)

LEDGER_KEY_UNIQUE_INDEX = "uq_provisioning_ledger_key_live"


class ProvisioningLedger(CuidMixin, TimestampMixin, Base):
    """Idempotency ledger entry. Status: pending -> completed | failed (terminal).

    At most one non-failed row per idempotency_key. claim_token/claimed_until
    form a lease so only one caller drives a pending entry at a time.
    planned_owner_id is assigned at reservation and used as the identity id.
    """

    __tablename__ = "provisioning_ledger"

    idempotency_key: Mapped[str] = mapped_column(String(128), nullable=False)
    admin_user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    requested_slug: Mapped[str] = mapped_column(String(50), nullable=False)
    owner_email: Mapped[str] = mapped_column(String(320), nullable=False)
    tenant_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("tenant.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    planned_owner_id: Mapped[str] = mapped_column(String(64), nullable=False)
    owner_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=LedgerStatus.PENDING.value
    )
    claim_token: Mapped[str | None] = mapped_column(String(64), nullable=True)
    claimed_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    request_data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            enum_check("status", [s.value for s in LedgerStatus]),
            name="provisioning_ledger_status_check",
        ),
        Index(
            LEDGER_KEY_UNIQUE_INDEX,
            "idempotency_key",
            unique=True,
            postgresql_where=text("status <> 'failed'"),
        ),
    )
