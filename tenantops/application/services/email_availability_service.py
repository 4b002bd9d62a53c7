"""Owner email availability pre-flight.

Checks tenant bindings (database) and identity bindings (identity provider).
A failed lookup is never reported as "available": it raises a retryable
EmailCheckFailedException instead.
"""

from __future__ import annotations

import logging

from tenantops.application.dtos.provisioning import EmailAvailability
from tenantops.application.interfaces.repositories import ITenantRepository
from tenantops.application.interfaces.services import IIdentityProvider
from tenantops.domain.exceptions import (
    EmailCheckFailedException,
    TenantOpsException,
    ValidationException,
)
from tenantops.infrastructure.exceptions import IdentityProviderError
from tenantops.shared.utils.email import is_system_email, is_valid_email, normalize_email

logger = logging.getLogger(__name__)


class EmailAvailabilityService:
    """Decide whether an email can become a new tenant owner's login."""

    def __init__(
        self,
        tenant_repo: ITenantRepository,
        identity_provider: IIdentityProvider,
    ) -> None:
        self.tenant_repo = tenant_repo
        self.identity_provider = identity_provider

    async def check(self, email: str) -> EmailAvailability:
        """Return availability for email (normalized: trimmed, lowercase).

        Raises:
            ValidationException: email is empty or malformed.
            EmailCheckFailedException: a lookup failed (retryable).
        """
        normalized = normalize_email(email)
        if not normalized or not is_valid_email(normalized):
            raise ValidationException("Email address is not valid", field="email")
        if is_system_email(normalized):
            return EmailAvailability(
                email=normalized,
                available=False,
                reason="Email matches a reserved system address",
            )

        try:
            tenant = await self.tenant_repo.find_live_by_owner_email(normalized)
        except TenantOpsException:
            raise
        except Exception as e:
            logger.exception("Tenant lookup failed during email availability check")
            raise EmailCheckFailedException(normalized, "tenant lookup failed") from e
        if tenant is not None:
            return EmailAvailability(
                email=normalized,
                available=False,
                reason=f'Email is already assigned to tenant "{tenant.name}"',
                conflicting_tenant_id=tenant.id,
            )

        try:
            user = await self.identity_provider.find_user_by_email(normalized)
        except IdentityProviderError as e:
            logger.warning("Identity lookup failed during email availability check: %s", e.reason)
            raise EmailCheckFailedException(normalized, e.reason) from e
        if user is not None:
            return EmailAvailability(
                email=normalized,
                available=False,
                reason="Email is already registered to an existing account",
            )
        return EmailAvailability(email=normalized, available=True)
