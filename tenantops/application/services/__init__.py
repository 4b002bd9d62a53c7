"""Application services (use cases). Dependencies are injected as protocols."""

from tenantops.application.services.admin_auth_service import AdminAuthService
from tenantops.application.services.credential_service import CredentialService
from tenantops.application.services.email_availability_service import (
    EmailAvailabilityService,
)
from tenantops.application.services.provisioning_service import ProvisioningService
from tenantops.application.services.setup_link_service import SetupLinkService
from tenantops.application.services.tenant_admin_service import TenantAdminService

__all__ = [
    "AdminAuthService",
    "CredentialService",
    "EmailAvailabilityService",
    "ProvisioningService",
    "SetupLinkService",
    "TenantAdminService",
]
