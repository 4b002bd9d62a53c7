"""Password-setup links for tenant owners: issue (rate limited), validate and consume."""

from __future__ import annotations

import logging
from datetime import timedelta
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from tenantops.application.dtos.identity import AdminPrincipal
from tenantops.application.dtos.setup_link import (
    IssuedSetupLink,
    LinkTenant,
    LinkValidationResult,
    NewSetupLink,
    RateLimitPolicy,
)
from tenantops.application.dtos.tenant import TenantResult
from tenantops.application.interfaces.repositories import ISetupLinkStore, ITenantRepository
from tenantops.application.interfaces.services import IEmailSender, IIdentityProvider
from tenantops.domain.enums import (
    LinkValidationStatus,
    SetupLinkAction,
    SetupLinkMode,
    TenantStatus,
)
from tenantops.domain.exceptions import (
    LinkGenerationFailedException,
    NoOwnerEmailException,
    RateLimitedException,
    TenantNotActiveException,
    TenantNotFoundException,
    ValidationException,
)
from tenantops.infrastructure.exceptions import (
    EmailDeliveryError,
    IdentityConflictError,
    IdentityProviderError,
)
from tenantops.shared.telemetry.tracing import traced
from tenantops.shared.utils.datetime import utc_now
from tenantops.shared.utils.generators import generate_link_token, hash_token

logger = logging.getLogger(__name__)

LINK_TOKEN_PARAM = "linkToken"

# A pending tenant is still being provisioned; an invite there would create an
# identity that collides with the planned owner id.
LINKABLE_STATUSES = frozenset({TenantStatus.ACTIVE, TenantStatus.SUSPENDED})


def with_link_token(url: str, token: str) -> str:
    """Return url with linkToken=<token> added to (or replaced in) its query string."""
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != LINK_TOKEN_PARAM]
    query.append((LINK_TOKEN_PARAM, token))
    return urlunsplit(parts._replace(query=urlencode(query)))


class SetupLinkService:
    """Issue and redeem one-time password-setup links."""

    def __init__(
        self,
        tenant_repo: ITenantRepository,
        link_store: ISetupLinkStore,
        identity_provider: IIdentityProvider,
        email_sender: IEmailSender,
        policy: RateLimitPolicy,
        *,
        ttl_hours: int = 48,
        default_redirect_url: str,
    ) -> None:
        self.tenant_repo = tenant_repo
        self.link_store = link_store
        self.identity_provider = identity_provider
        self.email_sender = email_sender
        self.policy = policy
        self.ttl_hours = ttl_hours
        self.default_redirect_url = default_redirect_url

    async def _resolve_mode(self, tenant: TenantResult) -> SetupLinkMode:
        """RECOVERY when the tenant's owner identity exists, else INVITE."""
        if not tenant.owner_id:
            return SetupLinkMode.INVITE
        try:
            owner = await self.identity_provider.get_user(tenant.owner_id)
        except IdentityProviderError as e:
            raise LinkGenerationFailedException(tenant.id, e.reason) from e
        return SetupLinkMode.RECOVERY if owner is not None else SetupLinkMode.INVITE

    async def _generate_provider_link(
        self, tenant: TenantResult, mode: SetupLinkMode, email: str, redirect_to: str
    ) -> tuple[SetupLinkMode, str]:
        try:
            return mode, await self.identity_provider.generate_link(mode, email, redirect_to)
        except IdentityConflictError as e:
            if mode is not SetupLinkMode.INVITE:
                raise LinkGenerationFailedException(tenant.id, e.reason) from e
            logger.info("Owner identity already exists for tenant %s; using recovery link", tenant.id)
        except IdentityProviderError as e:
            raise LinkGenerationFailedException(tenant.id, e.reason) from e
        try:
            link = await self.identity_provider.generate_link(
                SetupLinkMode.RECOVERY, email, redirect_to
            )
        except IdentityProviderError as e:
            raise LinkGenerationFailedException(tenant.id, e.reason) from e
        return SetupLinkMode.RECOVERY, link

    @traced("setup_links.issue")
    async def issue(
        self,
        tenant_id: str,
        admin: AdminPrincipal,
        *,
        send_email: bool = True,
        login_redirect_url: str | None = None,
    ) -> IssuedSetupLink:
        """Issue a password-setup link for the tenant's owner email.

        Raises:
            TenantNotFoundException: unknown tenant.
            TenantNotActiveException: tenant is pending or archived (no provider call made).
            NoOwnerEmailException: tenant has no owner email (nothing written).
            LinkGenerationFailedException: identity provider failed.
            RateLimitedException: tenant or admin limit reached (nothing written).
        """
        tenant = await self.tenant_repo.get_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundException(tenant_id)
        if tenant.status not in LINKABLE_STATUSES:
            raise TenantNotActiveException(tenant.id, tenant.status.value)
        if not tenant.owner_email:
            raise NoOwnerEmailException(tenant_id)
        email = tenant.owner_email

        token = generate_link_token()
        expires_at = utc_now() + timedelta(hours=self.ttl_hours)
        redirect_to = with_link_token(login_redirect_url or self.default_redirect_url, token)
        mode = await self._resolve_mode(tenant)
        mode, link = await self._generate_provider_link(tenant, mode, email, redirect_to)

        snapshot = await self.link_store.record_issue(
            NewSetupLink(
                token_hash=hash_token(token),
                tenant_id=tenant.id,
                email=email,
                mode=mode,
                created_by=admin.user_id,
                expires_at=expires_at,
            ),
            self.policy,
        )
        if snapshot.limited:
            logger.warning(
                "Setup link rate limited tenant=%s admin=%s reason=%s",
                tenant.id,
                admin.user_id,
                snapshot.limited_reason,
            )
            raise RateLimitedException(snapshot.limited_reason or "tenant", snapshot.to_dict())

        email_sent = False
        email_error: str | None = None
        if send_email:
            try:
                await self.email_sender.send_setup_link(
                    to=email,
                    tenant_name=tenant.name,
                    link=link,
                    mode=mode,
                    expires_at=expires_at,
                )
                email_sent = True
            except EmailDeliveryError as e:
                email_error = e.message
                logger.warning("Setup link email failed for tenant %s: %s", tenant.id, e.message)

        logger.info(
            "Setup link issued tenant=%s mode=%s admin=%s email_sent=%s",
            tenant.id,
            mode.value,
            admin.user_id,
            email_sent,
        )
        return IssuedSetupLink(
            tenant_id=tenant.id,
            owner_email=email,
            mode=mode,
            link=link,
            link_token=token,
            expires_at=expires_at,
            rate_limit=snapshot,
            email_sent=email_sent,
            email_error=email_error,
        )

    @traced("setup_links.validate")
    async def validate(
        self, token: str, action: SetupLinkAction = SetupLinkAction.VALIDATE
    ) -> LinkValidationResult:
        """Check a link token; with CONSUME also mark it used.

        Order: unknown -> NOT_FOUND, used -> USED, past expiry -> EXPIRED.
        A consume that loses a concurrent race reports USED.
        """
        if not token or not token.strip():
            raise ValidationException("Link token is required", field="linkToken")
        record = await self.link_store.get_by_token_hash(hash_token(token.strip()))
        if record is None:
            return LinkValidationResult(status=LinkValidationStatus.NOT_FOUND)
        if record.used:
            return LinkValidationResult(
                status=LinkValidationStatus.USED, expires_at=record.expires_at
            )
        now = utc_now()
        if now > record.expires_at:
            return LinkValidationResult(
                status=LinkValidationStatus.EXPIRED, expires_at=record.expires_at
            )
        tenant = await self.tenant_repo.get_by_id(record.tenant_id)
        if tenant is None:
            return LinkValidationResult(status=LinkValidationStatus.NOT_FOUND)

        consumed = False
        if action is SetupLinkAction.CONSUME:
            if not await self.link_store.mark_used(record.id, now):
                return LinkValidationResult(
                    status=LinkValidationStatus.USED, expires_at=record.expires_at
                )
            consumed = True
            logger.info("Setup link consumed tenant=%s link=%s", tenant.id, record.id)

        return LinkValidationResult(
            status=LinkValidationStatus.VALID,
            consumed=consumed,
            expires_at=record.expires_at,
            tenant=LinkTenant(id=tenant.id, slug=tenant.slug, name=tenant.name, email=record.email),
        )
