"""Admin management of a tenant owner's credentials (email, password, reset link)."""

from __future__ import annotations

import logging

from tenantops.application.dtos.credentials import CredentialActionResult
from tenantops.application.dtos.identity import AdminPrincipal
from tenantops.application.dtos.tenant import TenantResult
from tenantops.application.interfaces.repositories import ITenantRepository
from tenantops.application.interfaces.services import IIdentityProvider
from tenantops.application.services.email_availability_service import (
    EmailAvailabilityService,
)
from tenantops.domain.enums import CredentialAction, SetupLinkMode
from tenantops.domain.exceptions import (
    CredentialUpdateFailedException,
    EmailUnavailableException,
    NoOwnerException,
    TenantNotFoundException,
    ValidationException,
)
from tenantops.infrastructure.exceptions import IdentityConflictError, IdentityProviderError
from tenantops.shared.utils.email import normalize_email
from tenantops.shared.utils.generators import generate_secure_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class CredentialService:
    """Apply credential actions to the owner identity of a tenant.

    Tenant writes happen in the caller's transaction before the identity
    provider call, so a provider failure rolls the tenant change back.
    """

    def __init__(
        self,
        tenant_repo: ITenantRepository,
        identity_provider: IIdentityProvider,
        email_checker: EmailAvailabilityService,
        *,
        password_length: int = 16,
        reset_redirect_url: str,
    ) -> None:
        self.tenant_repo = tenant_repo
        self.identity_provider = identity_provider
        self.email_checker = email_checker
        self.password_length = password_length
        self.reset_redirect_url = reset_redirect_url

    async def _owned_tenant(self, tenant_id: str) -> tuple[TenantResult, str]:
        tenant = await self.tenant_repo.get_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundException(tenant_id)
        if not tenant.owner_id:
            raise NoOwnerException(tenant_id)
        return tenant, tenant.owner_id

    async def apply(
        self,
        tenant_id: str,
        action: CredentialAction,
        admin: AdminPrincipal,
        *,
        new_email: str | None = None,
        new_password: str | None = None,
    ) -> CredentialActionResult:
        """Dispatch one credential action."""
        logger.info(
            "Credential action %s on tenant %s by admin %s", action.value, tenant_id, admin.user_id
        )
        if action is CredentialAction.UPDATE_EMAIL:
            return await self.update_email(tenant_id, new_email or "")
        if action is CredentialAction.UPDATE_PASSWORD:
            return await self.update_password(tenant_id, new_password or "")
        if action is CredentialAction.GENERATE_PASSWORD:
            return await self.generate_password(tenant_id)
        return await self.reset_password(tenant_id)

    async def update_email(self, tenant_id: str, new_email: str) -> CredentialActionResult:
        tenant, owner_id = await self._owned_tenant(tenant_id)
        email = normalize_email(new_email)
        if not email:
            raise ValidationException("newEmail is required for update_email", field="newEmail")
        if email == tenant.owner_email:
            return CredentialActionResult(
                tenant_id=tenant.id,
                action=CredentialAction.UPDATE_EMAIL,
                owner_email=email,
                message="Email unchanged",
            )
        availability = await self.email_checker.check(email)
        if not availability.available:
            raise EmailUnavailableException(
                email,
                availability.reason or "Email is not available",
                availability.conflicting_tenant_id,
            )
        await self.tenant_repo.update_owner_email(tenant.id, email)
        try:
            await self.identity_provider.update_user(owner_id, email=email)
        except IdentityConflictError as e:
            raise EmailUnavailableException(
                email, "Email is already registered to another account"
            ) from e
        except IdentityProviderError as e:
            raise CredentialUpdateFailedException(CredentialAction.UPDATE_EMAIL.value, e.reason) from e
        return CredentialActionResult(
            tenant_id=tenant.id,
            action=CredentialAction.UPDATE_EMAIL,
            owner_email=email,
            message="Owner email updated",
        )

    async def update_password(self, tenant_id: str, new_password: str) -> CredentialActionResult:
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                f"newPassword must be at least {MIN_PASSWORD_LENGTH} characters",
                field="newPassword",
            )
        tenant, owner_id = await self._owned_tenant(tenant_id)
        await self._set_password(owner_id, new_password, CredentialAction.UPDATE_PASSWORD)
        return CredentialActionResult(
            tenant_id=tenant.id,
            action=CredentialAction.UPDATE_PASSWORD,
            owner_email=tenant.owner_email or "",
            message="Owner password updated",
        )

    async def generate_password(self, tenant_id: str) -> CredentialActionResult:
        tenant, owner_id = await self._owned_tenant(tenant_id)
        password = generate_secure_password(self.password_length)
        await self._set_password(owner_id, password, CredentialAction.GENERATE_PASSWORD)
        return CredentialActionResult(
            tenant_id=tenant.id,
            action=CredentialAction.GENERATE_PASSWORD,
            owner_email=tenant.owner_email or "",
            message="New owner password generated",
            new_password=password,
        )

    async def reset_password(self, tenant_id: str) -> CredentialActionResult:
        tenant, _ = await self._owned_tenant(tenant_id)
        if not tenant.owner_email:
            raise ValidationException("Tenant has no owner email", field="ownerEmail")
        try:
            link = await self.identity_provider.generate_link(
                SetupLinkMode.RECOVERY, tenant.owner_email, self.reset_redirect_url
            )
        except IdentityProviderError as e:
            raise CredentialUpdateFailedException(CredentialAction.RESET_PASSWORD.value, e.reason) from e
        return CredentialActionResult(
            tenant_id=tenant.id,
            action=CredentialAction.RESET_PASSWORD,
            owner_email=tenant.owner_email,
            message="Password reset link generated",
            reset_link=link,
        )

    async def _set_password(self, owner_id: str, password: str, action: CredentialAction) -> None:
        try:
            await self.identity_provider.update_user(owner_id, password=password)
        except IdentityProviderError as e:
            raise CredentialUpdateFailedException(action.value, e.reason) from e
