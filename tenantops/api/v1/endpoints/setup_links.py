"""Password-setup links: issue (admin) and validate/consume (public)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from tenantops.api.v1.dependencies import (
    get_current_admin,
    get_request_id,
    get_setup_link_service,
)
from tenantops.application.dtos.identity import AdminPrincipal
from tenantops.application.services import SetupLinkService
from tenantops.core.limiter import limit_link_validate, limit_setup_link
from tenantops.schemas.setup_link import (
    SetupLinkRequest,
    SetupLinkResponse,
    ValidateLinkRequest,
    ValidateLinkResponse,
)

router = APIRouter()


@router.post("", response_model=SetupLinkResponse, status_code=201)
@limit_setup_link
async def issue_setup_link(
    request: Request,
    body: SetupLinkRequest,
    admin: Annotated[AdminPrincipal, Depends(get_current_admin)],
    service: Annotated[SetupLinkService, Depends(get_setup_link_service)],
    request_id: Annotated[str | None, Depends(get_request_id)],
) -> SetupLinkResponse:
    """Issue a password-setup link for the tenant owner (429 when rate limited)."""
    issued = await service.issue(
        body.tenant_id,
        admin,
        send_email=body.send_email,
        login_redirect_url=body.login_redirect_url,
    )
    return SetupLinkResponse.from_issued(issued, request_id)


@router.post(
    "/validate",
    response_model=ValidateLinkResponse,
    responses={
        400: {"description": "Link already used or expired", "model": ValidateLinkResponse},
        404: {"description": "Unknown link", "model": ValidateLinkResponse},
    },
)
@limit_link_validate
async def validate_setup_link(
    request: Request,
    body: ValidateLinkRequest,
    service: Annotated[SetupLinkService, Depends(get_setup_link_service)],
) -> JSONResponse:
    """Check a link token; action=consume also marks it used (single use)."""
    result = await service.validate(body.link_token, body.action)
    status_code, payload = ValidateLinkResponse.from_result(result)
    return JSONResponse(
        status_code=status_code,
        content=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
