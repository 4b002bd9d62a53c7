"""Tenant API: provisioning plus tenant administration. Thin routes over application services."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from tenantops.api.v1.dependencies import (
    get_current_admin,
    get_provisioning_service,
    get_request_id,
    get_tenant_admin_service,
)
from tenantops.application.dtos.identity import AdminPrincipal
from tenantops.application.services import ProvisioningService, TenantAdminService
from tenantops.core.limiter import limit_provision, limit_writes
from tenantops.domain.enums import TenantStatus
from tenantops.schemas.provisioning import (
    OwnerCredentials,
    ProvisionedTenant,
    ProvisioningStatusResponse,
    ProvisionTenantRequest,
    ProvisionTenantResponse,
)
from tenantops.schemas.tenant import (
    SlugAvailabilityResponse,
    TenantListResponse,
    TenantResponse,
    TenantStatusUpdate,
    TenantUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()

CurrentAdmin = Annotated[AdminPrincipal, Depends(get_current_admin)]
AdminService = Annotated[TenantAdminService, Depends(get_tenant_admin_service)]


@router.post("/provision", response_model=ProvisionTenantResponse, status_code=201)
@limit_provision
async def provision_tenant(
    request: Request,
    response: Response,
    body: ProvisionTenantRequest,
    admin: CurrentAdmin,
    service: Annotated[ProvisioningService, Depends(get_provisioning_service)],
    request_id: Annotated[str | None, Depends(get_request_id)],
) -> ProvisionTenantResponse:
    """Provision a tenant and its owner account.

    Retrying with the same idempotencyKey never creates a second tenant: a
    completed request is replayed (200, password null) and an interrupted
    one resumes at the owner-account step.
    """
    result = await service.provision(body.to_command(), admin, request_id)
    if result.replayed:
        response.status_code = 200
    return ProvisionTenantResponse(
        data=ProvisionedTenant(
            tenant_id=result.tenant_id,
            slug=result.slug,
            owner_id=result.owner_id,
            replayed=result.replayed,
            idempotency_key=result.idempotency_key,
            owner_credentials=OwnerCredentials(
                email=result.owner_email, password=result.password
            ),
        ),
        request_id=request_id,
    )


@router.get("/provisioning/{idempotency_key}", response_model=ProvisioningStatusResponse)
async def get_provisioning_status(
    idempotency_key: str,
    admin: CurrentAdmin,
    service: Annotated[ProvisioningService, Depends(get_provisioning_service)],
) -> ProvisioningStatusResponse:
    """Ledger state for an idempotency key (used by admin retry screens)."""
    entry = await service.get_ledger_entry(idempotency_key)
    return ProvisioningStatusResponse.from_entry(entry)


@router.get("/slug-availability", response_model=SlugAvailabilityResponse)
async def check_slug_availability(
    admin: CurrentAdmin,
    service: AdminService,
    slug: str = Query(..., min_length=1, max_length=255),
) -> SlugAvailabilityResponse:
    """Sanitize and validate a slug, then report whether a live tenant already uses it."""
    accepted, available, reason = await service.check_slug_availability(slug)
    return SlugAvailabilityResponse(slug=accepted, available=available, reason=reason)


@router.get("", response_model=TenantListResponse)
async def list_tenants(
    admin: CurrentAdmin,
    service: AdminService,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    status: TenantStatus | None = Query(default=None),
) -> TenantListResponse:
    page = await service.list_tenants(skip=skip, limit=limit, status=status)
    return TenantListResponse(
        items=[TenantResponse.from_result(t) for t in page.items],
        total=page.total,
        skip=page.skip,
        limit=page.limit,
    )


@router.get("/{tenant_id}", response_model=TenantResponse)
async def get_tenant(tenant_id: str, admin: CurrentAdmin, service: AdminService) -> TenantResponse:
    return TenantResponse.from_result(await service.get_tenant(tenant_id))


@router.patch("/{tenant_id}", response_model=TenantResponse)
@limit_writes
async def update_tenant(
    request: Request,
    tenant_id: str,
    body: TenantUpdate,
    admin: CurrentAdmin,
    service: AdminService,
) -> TenantResponse:
    """Update profile fields (name, timezone, currency, contact details)."""
    updated = await service.update_tenant(tenant_id, body.to_changes())
    logger.info("Tenant %s updated by admin %s", tenant_id, admin.user_id)
    return TenantResponse.from_result(updated)


@router.patch("/{tenant_id}/status", response_model=TenantResponse)
@limit_writes
async def update_tenant_status(
    request: Request,
    tenant_id: str,
    body: TenantStatusUpdate,
    admin: CurrentAdmin,
    service: AdminService,
) -> TenantResponse:
    """Suspend, reactivate or archive a tenant (409 on a disallowed transition)."""
    return TenantResponse.from_result(await service.change_status(tenant_id, body.status))


@router.delete("/{tenant_id}", response_model=TenantResponse)
@limit_writes
async def archive_tenant(
    request: Request,
    tenant_id: str,
    admin: CurrentAdmin,
    service: AdminService,
) -> TenantResponse:
    """Soft-disable: the tenant is archived, never physically deleted."""
    return TenantResponse.from_result(await service.archive_tenant(tenant_id))
