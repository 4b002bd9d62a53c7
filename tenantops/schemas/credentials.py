"""Owner credential management API schemas."""

from pydantic import EmailStr, Field, model_validator

from tenantops.application.dtos.credentials import CredentialActionResult
from tenantops.domain.enums import CredentialAction
from tenantops.schemas.common import CamelModel


class CredentialActionRequest(CamelModel):
    """Request body for POST /tenants/{id}/credentials."""

    action: CredentialAction
    new_email: EmailStr | None = None
    new_password: str | None = Field(default=None, max_length=256)

    @model_validator(mode="after")
    def require_action_fields(self) -> "CredentialActionRequest":
        if self.action is CredentialAction.UPDATE_EMAIL and not self.new_email:
            raise ValueError("newEmail is required for update_email")
        if self.action is CredentialAction.UPDATE_PASSWORD and not self.new_password:
            raise ValueError("newPassword is required for update_password")
        return self


class CredentialActionResponse(CamelModel):
    success: bool = True
    tenant_id: str
    action: CredentialAction
    owner_email: str
    message: str
    new_password: str | None = None
    reset_link: str | None = None

    @classmethod
    def from_result(cls, result: CredentialActionResult) -> "CredentialActionResponse":
        return cls(
            tenant_id=result.tenant_id,
            action=result.action,
            owner_email=result.owner_email,
            message=result.message,
            new_password=result.new_password,
            reset_link=result.reset_link,
        )
