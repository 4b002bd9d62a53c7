"""Platform administrator ORM model (maps identity-provider users to admin roles)."""

from sqlalchemy import Boolean, CheckConstraint, String, true
from sqlalchemy.orm import Mapped, mapped_column

from tenantops.domain.enums import AdminRole
from tenantops.infrastructure.persistence.database import Base
from tenantops.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
    enum_check,
)


class AdminUser(CuidMixin, TimestampMixin, Base):
    """Platform admin. user_id is the identity provider's user id."""

    __tablename__ = "admin_user"

    user_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    __table_args__ = (
        CheckConstraint(
            enum_check("role", [r.value for r in AdminRole]),
            name="admin_user_role_check",
        ),
    )
