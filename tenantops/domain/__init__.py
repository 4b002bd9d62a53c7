"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from tenantops.domain.enums import LedgerStatus, SetupLinkMode, TenantStatus
from tenantops.domain.exceptions import (
    DuplicateSlugException,
    EmailUnavailableException,
    TenantNotFoundException,
    TenantOpsException,
    ValidationException,
)

__all__ = [
    "DuplicateSlugException",
    "EmailUnavailableException",
    "LedgerStatus",
    "SetupLinkMode",
    "TenantNotFoundException",
    "TenantOpsException",
    "TenantStatus",
    "ValidationException",
]
