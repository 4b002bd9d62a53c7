"""Tenant repository (request-scoped session). Returns application DTOs."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tenantops.application.dtos.tenant import TenantChanges, TenantPage, TenantResult
from tenantops.domain.enums import TenantStatus
from tenantops.domain.exceptions import EmailUnavailableException
from tenantops.infrastructure.persistence.constraints import (
    ConflictContext,
    translate_integrity_error,
)
from tenantops.infrastructure.persistence.models.tenant import Tenant
from tenantops.infrastructure.persistence.repositories.base import BaseRepository


def tenant_to_result(t: Tenant) -> TenantResult:
    """Map ORM Tenant to application TenantResult."""
    return TenantResult(
        id=t.id,
        name=t.name,
        slug=t.slug,
        status=TenantStatus(t.status),
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


class TenantRepository(BaseRepository[Tenant]):
    """Tenant reads and admin updates. Writes run in the caller's transaction."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Tenant)

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        tenant = await self.get_entity_by_id(tenant_id)
        return tenant_to_result(tenant) if tenant else None

    async def list_tenants(
        self, skip: int = 0, limit: int = 50, status: TenantStatus | None = None
    ) -> TenantPage:
        stmt = select(Tenant)
        count_stmt = select(func.count()).select_from(Tenant)
        if status is not None:
            stmt = stmt.where(Tenant.status == status.value)
            count_stmt = count_stmt.where(Tenant.status == status.value)
        stmt = stmt.order_by(Tenant.created_at.desc(), Tenant.id).offset(skip).limit(limit)
        rows = (await self.db.execute(stmt)).scalars().all()
        total = (await self.db.execute(count_stmt)).scalar_one()
        return TenantPage(
            items=[tenant_to_result(t) for t in rows],
            total=total,
            skip=skip,
            limit=limit,
        )

    async def find_live_by_owner_email(self, email: str) -> TenantResult | None:
        result = await self.db.execute(
            select(Tenant)
            .where(Tenant.owner_email == email)
            .where(Tenant.status != TenantStatus.ARCHIVED.value)
            .limit(1)
        )
        tenant = result.scalar_one_or_none()
        return tenant_to_result(tenant) if tenant else None

    async def slug_in_use(self, slug: str) -> bool:
        result = await self.db.execute(
            select(Tenant.id)
            .where(Tenant.slug == slug)
            .where(Tenant.status != TenantStatus.ARCHIVED.value)
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def update_profile(
        self, tenant_id: str, changes: TenantChanges
    ) -> TenantResult | None:
        tenant = await self.get_entity_by_id(tenant_id)
        if tenant is None:
            return None
        for key, value in changes.as_dict().items():
            setattr(tenant, key, value)
        updated = await self.update(tenant)
        return tenant_to_result(updated)

    async def update_status(
        self, tenant_id: str, status: TenantStatus
    ) -> TenantResult | None:
        tenant = await self.get_entity_by_id(tenant_id)
        if tenant is None:
            return None
        tenant.status = status.value
        updated = await self.update(tenant)
        return tenant_to_result(updated)

    async def update_owner_email(self, tenant_id: str, email: str) -> TenantResult | None:
        """Set owner email. Raises EmailUnavailableException when another live tenant has it."""
        tenant = await self.get_entity_by_id(tenant_id)
        if tenant is None:
            return None
        tenant.owner_email = email
        try:
            updated = await self.update(tenant)
        except IntegrityError as e:
            translated = translate_integrity_error(e, ConflictContext(email=email))
            if isinstance(translated, EmailUnavailableException):
                raise translated from e
            raise
        return tenant_to_result(updated)
