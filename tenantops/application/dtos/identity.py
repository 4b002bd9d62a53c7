"""DTOs for identity-provider users and authenticated administrators."""

from dataclasses import dataclass, field
from typing import Any

from tenantops.domain.enums import AdminRole


@dataclass(frozen=True)
class IdentityUser:
    """User as reported by the identity provider."""

    id: str
    email: str | None
    user_metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def tenant_id(self) -> str | None:
        value = self.user_metadata.get("tenant_id")
        return str(value) if value is not None else None


@dataclass(frozen=True)
class AdminPrincipal:
    """Authenticated platform administrator allowed to manage tenants."""

    user_id: str
    email: str | None
    role: AdminRole


@dataclass(frozen=True)
class AdminUserResult:
    """Admin user row read-model."""

    id: str
    user_id: str
    email: str
    role: AdminRole
    is_active: bool
