"""Owner credential management for a tenant (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from tenantops.api.v1.dependencies import get_credential_service, get_current_admin
from tenantops.application.dtos.identity import AdminPrincipal
from tenantops.application.services import CredentialService
from tenantops.core.limiter import limit_writes
from tenantops.schemas.credentials import CredentialActionRequest, CredentialActionResponse

router = APIRouter()


@router.post("/{tenant_id}/credentials", response_model=CredentialActionResponse)
@limit_writes
async def manage_owner_credentials(
    request: Request,
    tenant_id: str,
    body: CredentialActionRequest,
    admin: Annotated[AdminPrincipal, Depends(get_current_admin)],
    service: Annotated[CredentialService, Depends(get_credential_service)],
) -> CredentialActionResponse:
    """Update email or password, generate a password, or create a reset link for the owner."""
    result = await service.apply(
        tenant_id,
        body.action,
        admin,
        new_email=body.new_email,
        new_password=body.new_password,
    )
    return CredentialActionResponse.from_result(result)
