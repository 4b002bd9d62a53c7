"""Translate unique-constraint violations into domain exceptions.

The violated constraint is read from the driver's structured error
(asyncpg ``constraint_name``, psycopg ``diag.constraint_name``), never from
the message text.
"""

from collections.abc import Callable

from sqlalchemy.exc import IntegrityError

from tenantops.domain.exceptions import (
    DuplicateRequestException,
    DuplicateSlugException,
    EmailUnavailableException,
    TenantOpsException,
)
from tenantops.infrastructure.persistence.models.provisioning_ledger import (
    LEDGER_KEY_UNIQUE_INDEX,
)
from tenantops.infrastructure.persistence.models.tenant import (
    TENANT_OWNER_EMAIL_UNIQUE_INDEX,
    TENANT_SLUG_UNIQUE_INDEX,
)

UNIQUE_VIOLATION_SQLSTATE = "23505"


class ConflictContext:
    """Values a translated exception can name (slug, email, idempotency key)."""

    def __init__(
        self,
        slug: str | None = None,
        email: str | None = None,
        idempotency_key: str | None = None,
    ) -> None:
        self.slug = slug or ""
        self.email = email or ""
        self.idempotency_key = idempotency_key or ""


_UNIQUE_CONSTRAINT_ERRORS: dict[str, Callable[[ConflictContext], TenantOpsException]] = {
    TENANT_SLUG_UNIQUE_INDEX: lambda ctx: DuplicateSlugException(ctx.slug),
    TENANT_OWNER_EMAIL_UNIQUE_INDEX: lambda ctx: EmailUnavailableException(
        ctx.email, "Email is already assigned to another tenant"
    ),
    LEDGER_KEY_UNIQUE_INDEX: lambda ctx: DuplicateRequestException(
        ctx.idempotency_key, "another request with this idempotency key is in progress"
    ),
}


def constraint_name_of(exc: IntegrityError) -> str | None:
    """Return the violated constraint/index name from the DBAPI error, if exposed."""
    orig = getattr(exc, "orig", None)
    if orig is None:
        return None
    diag = getattr(orig, "diag", None)
    name = getattr(diag, "constraint_name", None)
    if name:
        return name
    # SQLAlchemy's asyncpg adapter wraps the asyncpg exception as __cause__.
    for candidate in (orig, getattr(orig, "__cause__", None)):
        name = getattr(candidate, "constraint_name", None)
        if name:
            return name
    return None


def sqlstate_of(exc: IntegrityError) -> str | None:
    orig = getattr(exc, "orig", None)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return code
    return None


def translate_integrity_error(
    exc: IntegrityError, context: ConflictContext
) -> TenantOpsException | None:
    """Map a known unique violation to its domain exception; None when unknown."""
    name = constraint_name_of(exc)
    if name is None:
        return None
    factory = _UNIQUE_CONSTRAINT_ERRORS.get(name)
    if factory is None:
        return None
    return factory(context)
