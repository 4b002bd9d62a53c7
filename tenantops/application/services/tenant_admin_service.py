"""Tenant administration: list, read, update profile, change status, slug availability."""

from __future__ import annotations

import logging

from tenantops.application.dtos.tenant import TenantChanges, TenantPage, TenantResult
from tenantops.application.interfaces.repositories import ITenantRepository
from tenantops.domain.enums import TenantStatus
from tenantops.domain.exceptions import (
    InvalidSlugException,
    InvalidStatusTransitionException,
    TenantNotFoundException,
)
from tenantops.shared.utils.email import normalize_email
from tenantops.shared.utils.sanitization import InputSanitizer
from tenantops.shared.utils.slug import sanitize_slug, validate_slug

logger = logging.getLogger(__name__)

# Activation of a PENDING tenant only happens through provisioning.
ALLOWED_STATUS_TRANSITIONS: dict[TenantStatus, frozenset[TenantStatus]] = {
    TenantStatus.PENDING: frozenset({TenantStatus.ARCHIVED}),
    TenantStatus.ACTIVE: frozenset({TenantStatus.SUSPENDED, TenantStatus.ARCHIVED}),
    TenantStatus.SUSPENDED: frozenset({TenantStatus.ACTIVE, TenantStatus.ARCHIVED}),
    TenantStatus.ARCHIVED: frozenset(),
}


class TenantAdminService:
    """Tenant reads and admin updates over ITenantRepository."""

    def __init__(self, tenant_repo: ITenantRepository) -> None:
        self.tenant_repo = tenant_repo

    async def list_tenants(
        self, skip: int = 0, limit: int = 50, status: TenantStatus | None = None
    ) -> TenantPage:
        return await self.tenant_repo.list_tenants(skip=skip, limit=limit, status=status)

    async def get_tenant(self, tenant_id: str) -> TenantResult:
        tenant = await self.tenant_repo.get_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundException(tenant_id)
        return tenant

    async def update_tenant(self, tenant_id: str, changes: TenantChanges) -> TenantResult:
        cleaned = TenantChanges(
            name=InputSanitizer.sanitize_text(changes.name) or None,
            timezone=changes.timezone,
            currency=changes.currency.upper() if changes.currency else None,
            contact_email=normalize_email(changes.contact_email) or None,
            phone=changes.phone,
            website=changes.website,
            description=InputSanitizer.sanitize_text(changes.description),
            address=InputSanitizer.sanitize_dict(changes.address) if changes.address else None,
        )
        updated = await self.tenant_repo.update_profile(tenant_id, cleaned)
        if updated is None:
            raise TenantNotFoundException(tenant_id)
        return updated

    async def change_status(self, tenant_id: str, status: TenantStatus) -> TenantResult:
        """Move tenant to status if allowed; setting the current status is a no-op."""
        tenant = await self.get_tenant(tenant_id)
        if tenant.status is status:
            return tenant
        if status not in ALLOWED_STATUS_TRANSITIONS[tenant.status]:
            raise InvalidStatusTransitionException(tenant_id, tenant.status.value, status.value)
        updated = await self.tenant_repo.update_status(tenant_id, status)
        if updated is None:
            raise TenantNotFoundException(tenant_id)
        logger.info(
            "Tenant %s status changed %s -> %s", tenant_id, tenant.status.value, status.value
        )
        return updated

    async def archive_tenant(self, tenant_id: str) -> TenantResult:
        """Soft-disable a tenant (never physically deleted)."""
        return await self.change_status(tenant_id, TenantStatus.ARCHIVED)

    async def check_slug_availability(self, slug: str) -> tuple[str, bool, str | None]:
        """Return (sanitized slug, available, reason)."""
        try:
            accepted = validate_slug(slug)
        except InvalidSlugException as e:
            return e.slug or sanitize_slug(slug), False, e.message
        if await self.tenant_repo.slug_in_use(accepted):
            return accepted, False, "Slug is already taken"
        return accepted, True, None
