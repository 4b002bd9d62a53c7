"""Persistence models: ORM entities and mixins."""

from tenantops.infrastructure.persistence.models.admin_user import AdminUser
from tenantops.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    TimestampMixin,
)
from tenantops.infrastructure.persistence.models.password_setup_link import (
    PasswordSetupLink,
)
from tenantops.infrastructure.persistence.models.provisioning_ledger import (
    ProvisioningLedger,
)
from tenantops.infrastructure.persistence.models.tenant import Tenant

__all__ = [
    "AdminUser",
    "CreatedAtMixin",
    "CuidMixin",
    "PasswordSetupLink",
    "ProvisioningLedger",
    "Tenant",
    "TimestampMixin",
]
