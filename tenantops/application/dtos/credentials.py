"""DTOs for tenant owner credential management."""

from dataclasses import dataclass

from tenantops.domain.enums import CredentialAction


@dataclass(frozen=True)
class CredentialActionResult:
    """Outcome of a credential action. new_password/reset_link only for their actions."""

    tenant_id: str
    action: CredentialAction
    owner_email: str
    message: str
    new_password: str | None = None
    reset_link: str | None = None
