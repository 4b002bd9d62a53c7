"""DTOs for password-setup links (issue, rate limiting, validation)."""

from dataclasses import dataclass
from datetime import datetime

from tenantops.domain.enums import LinkValidationStatus, SetupLinkMode


@dataclass(frozen=True)
class SetupLinkRecord:
    """Stored password-setup link (token kept only as a hash)."""

    id: str
    tenant_id: str
    email: str
    mode: SetupLinkMode
    created_by: str
    expires_at: datetime
    used: bool = False
    used_at: datetime | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class NewSetupLink:
    """Link row to persist once rate limits pass."""

    token_hash: str
    tenant_id: str
    email: str
    mode: SetupLinkMode
    created_by: str
    expires_at: datetime


@dataclass(frozen=True)
class RateLimitSnapshot:
    """Issuance counters for one tenant and one admin over their sliding windows.

    Counts include the link being issued when limited is False.
    """

    tenant_count: int
    tenant_limit: int
    tenant_window_seconds: int
    admin_count: int
    admin_limit: int
    admin_window_seconds: int
    limited: bool = False
    limited_reason: str | None = None

    @property
    def tenant_remaining(self) -> int:
        return max(self.tenant_limit - self.tenant_count, 0)

    @property
    def admin_remaining(self) -> int:
        return max(self.admin_limit - self.admin_count, 0)

    def to_dict(self) -> dict[str, int | bool | str | None]:
        """camelCase dict used in API responses and RATE_LIMITED error details."""
        return {
            "tenantCount": self.tenant_count,
            "tenantLimit": self.tenant_limit,
            "tenantRemaining": self.tenant_remaining,
            "tenantWindowSeconds": self.tenant_window_seconds,
            "adminCount": self.admin_count,
            "adminLimit": self.admin_limit,
            "adminRemaining": self.admin_remaining,
            "adminWindowSeconds": self.admin_window_seconds,
            "limited": self.limited,
            "limitedReason": self.limited_reason,
        }


@dataclass(frozen=True)
class RateLimitPolicy:
    """Per-tenant and per-admin limits for setup-link issuance."""

    tenant_limit: int
    tenant_window_seconds: int
    admin_limit: int
    admin_window_seconds: int


@dataclass(frozen=True)
class IssuedSetupLink:
    """Result of issuing a setup link."""

    tenant_id: str
    owner_email: str
    mode: SetupLinkMode
    link: str
    link_token: str
    expires_at: datetime
    rate_limit: RateLimitSnapshot
    email_sent: bool = False
    email_error: str | None = None


@dataclass(frozen=True)
class LinkTenant:
    """Tenant summary returned with a valid link."""

    id: str
    slug: str
    name: str
    email: str


@dataclass(frozen=True)
class LinkValidationResult:
    """Outcome of validate/consume. tenant is set only when status is VALID."""

    status: LinkValidationStatus
    consumed: bool = False
    expires_at: datetime | None = None
    tenant: LinkTenant | None = None
