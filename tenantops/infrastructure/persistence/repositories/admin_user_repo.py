"""Admin user repository: maps identity users to platform admin roles."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenantops.application.dtos.identity import AdminUserResult
from tenantops.domain.enums import AdminRole
from tenantops.infrastructure.persistence.models.admin_user import AdminUser
from tenantops.infrastructure.persistence.repositories.base import BaseRepository


def _admin_to_result(row: AdminUser) -> AdminUserResult:
    return AdminUserResult(
        id=row.id,
        user_id=row.user_id,
        email=row.email,
        role=AdminRole(row.role),
        is_active=row.is_active,
    )


class AdminUserRepository(BaseRepository[AdminUser]):
    """Read admin rows; create_admin is used by the seed script."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AdminUser)

    async def get_active_by_user_id(self, user_id: str) -> AdminUserResult | None:
        result = await self.db.execute(
            select(AdminUser)
            .where(AdminUser.user_id == user_id)
            .where(AdminUser.is_active.is_(True))
        )
        row = result.scalar_one_or_none()
        return _admin_to_result(row) if row else None

    async def create_admin(self, user_id: str, email: str, role: AdminRole) -> AdminUserResult:
        created = await self.create(
            AdminUser(user_id=user_id, email=email.strip().lower(), role=role.value)
        )
        return _admin_to_result(created)
