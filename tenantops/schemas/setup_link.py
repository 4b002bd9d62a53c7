"""Password-setup link API schemas."""

from datetime import datetime
from typing import Any

from pydantic import Field

from tenantops.application.dtos.setup_link import IssuedSetupLink, LinkValidationResult
from tenantops.domain.enums import LinkValidationStatus, SetupLinkAction, SetupLinkMode
from tenantops.schemas.common import CamelModel


class SetupLinkRequest(CamelModel):
    """Request body for POST /setup-links."""

    tenant_id: str = Field(..., min_length=1, max_length=64)
    send_email: bool = True
    login_redirect_url: str | None = Field(default=None, max_length=2048)


class SetupLinkResponse(CamelModel):
    success: bool = True
    request_id: str | None = None
    tenant_id: str
    owner_email: str
    mode: SetupLinkMode
    link: str
    expires_at: datetime
    email_sent: bool
    email_error: str | None = None
    rate_limit: dict[str, Any]
    message: str

    @classmethod
    def from_issued(cls, issued: IssuedSetupLink, request_id: str | None) -> "SetupLinkResponse":
        if issued.email_sent:
            message = f"Setup link sent to {issued.owner_email}"
        elif issued.email_error:
            message = "Setup link created but the email could not be sent"
        else:
            message = "Setup link created"
        return cls(
            request_id=request_id,
            tenant_id=issued.tenant_id,
            owner_email=issued.owner_email,
            mode=issued.mode,
            link=issued.link,
            expires_at=issued.expires_at,
            email_sent=issued.email_sent,
            email_error=issued.email_error,
            rate_limit=issued.rate_limit.to_dict(),
            message=message,
        )


class ValidateLinkRequest(CamelModel):
    """Request body for POST /setup-links/validate (public)."""

    link_token: str = Field(..., max_length=256)
    action: SetupLinkAction = SetupLinkAction.VALIDATE


class LinkTenantOut(CamelModel):
    id: str
    slug: str
    name: str
    email: str


_VALIDATION_MESSAGES = {
    LinkValidationStatus.VALID: "Link is valid",
    LinkValidationStatus.NOT_FOUND: "Link not found",
    LinkValidationStatus.USED: "Link has already been used",
    LinkValidationStatus.EXPIRED: "Link has expired",
}

_VALIDATION_STATUS_CODES = {
    LinkValidationStatus.VALID: 200,
    LinkValidationStatus.NOT_FOUND: 404,
    LinkValidationStatus.USED: 400,
    LinkValidationStatus.EXPIRED: 400,
}


class ValidateLinkResponse(CamelModel):
    """Rendered with exclude_none: expired/used/tenant only appear when relevant."""

    valid: bool
    consumed: bool | None = None
    expired: bool | None = None
    used: bool | None = None
    tenant: LinkTenantOut | None = None
    expires_at: datetime | None = None
    message: str

    @classmethod
    def from_result(cls, result: LinkValidationResult) -> tuple[int, "ValidateLinkResponse"]:
        """Return (http status, body) for a validation result."""
        status = result.status
        tenant = None
        if result.tenant is not None:
            tenant = LinkTenantOut(
                id=result.tenant.id,
                slug=result.tenant.slug,
                name=result.tenant.name,
                email=result.tenant.email,
            )
        body = cls(
            valid=status is LinkValidationStatus.VALID,
            consumed=result.consumed if status is LinkValidationStatus.VALID else None,
            expired=True if status is LinkValidationStatus.EXPIRED else None,
            used=True if status is LinkValidationStatus.USED else None,
            tenant=tenant,
            expires_at=result.expires_at,
            message=_VALIDATION_MESSAGES[status],
        )
        return _VALIDATION_STATUS_CODES[status], body
