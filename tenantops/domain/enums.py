"""Domain enumerations for tenantops.

Enums represent fixed sets of domain values (tenant status, ledger status,
setup-link mode, admin roles).
"""

from enum import Enum


class TenantStatus(str, Enum):
    """Tenant lifecycle status.

    PENDING tenants were reserved by provisioning but have no owner identity yet.
    ARCHIVED is the soft-disabled state; archived rows release their slug and
    owner email for reuse.
    """

    PENDING = "pending"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    ARCHIVED = "archived"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]


class LedgerStatus(str, Enum):
    """Provisioning ledger entry status. COMPLETED and FAILED are terminal."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not LedgerStatus.PENDING


class ProvisioningPhase(str, Enum):
    """Progress of the reservation transaction (logged at each transition)."""

    NOT_STARTED = "not_started"
    SLUG_LOCKED = "slug_locked"
    LEDGER_INSERTED = "ledger_inserted"
    TENANT_INSERTED = "tenant_inserted"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class ReservationOutcome(str, Enum):
    """How a reservation resolved against the idempotency ledger."""

    CREATED = "created"
    RESUMED = "resumed"
    REPLAYED = "replayed"


class SetupLinkMode(str, Enum):
    """Identity-provider action used for a password-setup link."""

    INVITE = "invite"
    RECOVERY = "recovery"


class SetupLinkAction(str, Enum):
    """Validate only checks the link; consume also marks it used."""

    VALIDATE = "validate"
    CONSUME = "consume"


class LinkValidationStatus(str, Enum):
    """Outcome of validating a password-setup link token."""

    VALID = "valid"
    NOT_FOUND = "not_found"
    USED = "used"
    EXPIRED = "expired"


class AdminRole(str, Enum):
    """Platform administrator roles. Only SUPER_ADMIN and ADMIN may manage tenants."""

    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    SUPPORT = "SUPPORT"

    @classmethod
    def tenant_managers(cls) -> frozenset["AdminRole"]:
        return frozenset({cls.SUPER_ADMIN, cls.ADMIN})


class CredentialAction(str, Enum):
    """Admin actions on a tenant owner's credentials."""

    UPDATE_EMAIL = "update_email"
    UPDATE_PASSWORD = "update_password"
    GENERATE_PASSWORD = "generate_password"
    RESET_PASSWORD = "reset_password"
