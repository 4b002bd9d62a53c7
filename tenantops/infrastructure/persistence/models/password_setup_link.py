"""Password-setup link ORM model. Stored by token_hash; used=true is terminal."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column

from tenantops.domain.enums import SetupLinkMode
from tenantops.infrastructure.persistence.database import Base
from tenantops.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    enum_check,
)


class PasswordSetupLink(CuidMixin, CreatedAtMixin, Base):
    """One-time link letting a tenant owner set a password. Issue rows double as rate-limit events."""

    __tablename__ = "password_setup_link"

    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    tenant_id: Mapped[str] = mapped_column(
        String, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    mode: Mapped[str] = mapped_column(String(16), nullable=False)
    created_by: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    used: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            enum_check("mode", [m.value for m in SetupLinkMode]),
            name="password_setup_link_mode_check",
        ),
        Index("ix_password_setup_link_tenant_created", "tenant_id", "created_at"),
        Index("ix_password_setup_link_creator_created", "created_by", "created_at"),
    )
