"""Application ports: repository and external-service protocols."""

from tenantops.application.interfaces.repositories import (
    IAdminUserRepository,
    IProvisioningStore,
    ISetupLinkStore,
    ITenantRepository,
)
from tenantops.application.interfaces.services import IEmailSender, IIdentityProvider

__all__ = [
    "IAdminUserRepository",
    "IEmailSender",
    "IIdentityProvider",
    "IProvisioningStore",
    "ISetupLinkStore",
    "ITenantRepository",
]
