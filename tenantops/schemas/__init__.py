"""API request/response schemas (camelCase JSON)."""

from tenantops.schemas.credentials import CredentialActionRequest, CredentialActionResponse
from tenantops.schemas.health import HealthResponse
from tenantops.schemas.provisioning import (
    ProvisioningStatusResponse,
    ProvisionTenantRequest,
    ProvisionTenantResponse,
)
from tenantops.schemas.setup_link import (
    SetupLinkRequest,
    SetupLinkResponse,
    ValidateLinkRequest,
    ValidateLinkResponse,
)
from tenantops.schemas.tenant import (
    SlugAvailabilityResponse,
    TenantListResponse,
    TenantResponse,
    TenantStatusUpdate,
    TenantUpdate,
)

__all__ = [
    "CredentialActionRequest",
    "CredentialActionResponse",
    "HealthResponse",
    "ProvisionTenantRequest",
    "ProvisionTenantResponse",
    "ProvisioningStatusResponse",
    "SetupLinkRequest",
    "SetupLinkResponse",
    "SlugAvailabilityResponse",
    "TenantListResponse",
    "TenantResponse",
    "TenantStatusUpdate",
    "TenantUpdate",
    "ValidateLinkRequest",
    "ValidateLinkResponse",
]
