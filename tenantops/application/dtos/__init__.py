"""Application DTOs: plain frozen dataclasses passed between layers."""

from tenantops.application.dtos.credentials import CredentialActionResult
from tenantops.application.dtos.identity import AdminPrincipal, AdminUserResult, IdentityUser
from tenantops.application.dtos.provisioning import (
    EmailAvailability,
    LedgerEntry,
    ProvisionTenantCommand,
    ProvisioningRequest,
    ProvisioningResult,
    Reservation,
)
from tenantops.application.dtos.setup_link import (
    IssuedSetupLink,
    LinkTenant,
    LinkValidationResult,
    NewSetupLink,
    RateLimitPolicy,
    RateLimitSnapshot,
    SetupLinkRecord,
)
from tenantops.application.dtos.tenant import (
    TenantChanges,
    TenantDraft,
    TenantPage,
    TenantResult,
)

__all__ = [
    "AdminPrincipal",
    "AdminUserResult",
    "CredentialActionResult",
    "EmailAvailability",
    "IdentityUser",
    "IssuedSetupLink",
    "LedgerEntry",
    "LinkTenant",
    "LinkValidationResult",
    "ProvisionTenantCommand",
    "NewSetupLink",
    "ProvisioningRequest",
    "ProvisioningResult",
    "RateLimitPolicy",
    "RateLimitSnapshot",
    "Reservation",
    "SetupLinkRecord",
    "TenantChanges",
    "TenantDraft",
    "TenantPage",
    "TenantResult",
]
