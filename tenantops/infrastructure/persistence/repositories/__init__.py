"""Repositories (request-scoped session) and stores (own transactions)."""

from tenantops.infrastructure.persistence.repositories.admin_user_repo import (
    AdminUserRepository,
)
from tenantops.infrastructure.persistence.repositories.provisioning_store import (
    ProvisioningStore,
)
from tenantops.infrastructure.persistence.repositories.setup_link_store import (
    SetupLinkStore,
)
from tenantops.infrastructure.persistence.repositories.tenant_repo import (
    TenantRepository,
)

__all__ = [
    "AdminUserRepository",
    "ProvisioningStore",
    "SetupLinkStore",
    "TenantRepository",
]
