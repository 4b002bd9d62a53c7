"""Tenant provisioning: reserve tenant + ledger atomically, then create the owner identity.

Flow for one request:

1. Validate slug and owner email; sanitize text fields.
2. Pre-flight email availability (skipped when the idempotency key already
   has a ledger entry, i.e. on resume or replay).
3. ProvisioningStore.reserve(): CREATED, RESUMED or REPLAYED.
4. For CREATED/RESUMED: create (or adopt) the owner identity using the
   ledger's planned identity id, then ProvisioningStore.complete().

A transient identity failure leaves the entry pending; retrying with the
same idempotency key resumes at step 4 without inserting a second tenant.
"""

from __future__ import annotations

import logging
import uuid

from tenantops.application.dtos.identity import AdminPrincipal, IdentityUser
from tenantops.application.dtos.provisioning import (
    LedgerEntry,
    ProvisioningRequest,
    ProvisioningResult,
    ProvisionTenantCommand,
    Reservation,
)
from tenantops.application.dtos.tenant import TenantDraft
from tenantops.application.interfaces.repositories import IProvisioningStore
from tenantops.application.interfaces.services import IIdentityProvider
from tenantops.application.services.email_availability_service import (
    EmailAvailabilityService,
)
from tenantops.domain.enums import ReservationOutcome
from tenantops.domain.exceptions import (
    AuthUserCreationFailedException,
    EmailUnavailableException,
    OwnerEmailRequiredException,
    ProvisioningFailedException,
    ResourceNotFoundException,
    TenantOpsException,
    ValidationException,
)
from tenantops.infrastructure.exceptions import IdentityConflictError, IdentityProviderError
from tenantops.shared.telemetry.tracing import add_span_attributes, add_span_event, traced
from tenantops.shared.utils.email import is_valid_email, normalize_email
from tenantops.shared.utils.generators import generate_secure_password
from tenantops.shared.utils.sanitization import InputSanitizer
from tenantops.shared.utils.slug import validate_slug

logger = logging.getLogger(__name__)

OWNER_ROLE = "tenant_owner"


class ProvisioningService:
    """Provision a tenant and its owner account exactly once per idempotency key."""

    def __init__(
        self,
        store: IProvisioningStore,
        email_checker: EmailAvailabilityService,
        identity_provider: IIdentityProvider,
        *,
        claim_ttl_seconds: int = 120,
        password_length: int = 16,
    ) -> None:
        self.store = store
        self.email_checker = email_checker
        self.identity_provider = identity_provider
        self.claim_ttl_seconds = claim_ttl_seconds
        self.password_length = password_length

    @staticmethod
    def _build_request(
        command: ProvisionTenantCommand,
        admin: AdminPrincipal,
        request_id: str | None,
    ) -> ProvisioningRequest:
        slug = validate_slug(command.slug)
        owner_email = normalize_email(command.owner_email)
        if not owner_email:
            raise OwnerEmailRequiredException()
        if not is_valid_email(owner_email):
            raise ValidationException("Owner email is not a valid address", field="owner.email")
        name = InputSanitizer.sanitize_text(command.name)
        if not name:
            raise ValidationException("Tenant name is required", field="basics.name")
        contact_email = normalize_email(command.contact_email) or None
        draft = TenantDraft(
            name=name,
            slug=slug,
            timezone=command.timezone,
            currency=command.currency.upper(),
            owner_email=owner_email,
            contact_email=contact_email,
            phone=command.phone,
            website=command.website,
            description=InputSanitizer.sanitize_text(command.description),
            address=InputSanitizer.sanitize_dict(command.address) if command.address else None,
        )
        return ProvisioningRequest(
            idempotency_key=command.idempotency_key or str(uuid.uuid4()),
            admin_user_id=admin.user_id,
            tenant=draft,
            owner_name=InputSanitizer.sanitize_text(command.owner_name),
            request_id=request_id,
        )

    @traced("provisioning.provision")
    async def provision(
        self,
        command: ProvisionTenantCommand,
        admin: AdminPrincipal,
        request_id: str | None = None,
    ) -> ProvisioningResult:
        """Provision a tenant (or replay / resume an earlier attempt with the same key).

        Raises:
            InvalidSlugException, OwnerEmailRequiredException, ValidationException: bad input.
            EmailUnavailableException, DuplicateSlugException, DuplicateRequestException: conflicts.
            AuthUserCreationFailedException: tenant reserved, identity step must be retried.
            ProvisioningFailedException: anything else (details.retryable says whether to retry).
        """
        request = self._build_request(command, admin, request_id)
        key = request.idempotency_key
        add_span_attributes(idempotency_key=key, slug=request.tenant.slug)
        logger.info(
            "Provisioning requested key=%s slug=%s admin=%s request_id=%s",
            key,
            request.tenant.slug,
            admin.user_id,
            request_id,
        )

        existing = await self.store.get_by_idempotency_key(key)
        if existing is None:
            availability = await self.email_checker.check(request.tenant.owner_email)
            if not availability.available:
                raise EmailUnavailableException(
                    availability.email,
                    availability.reason or "Email is not available",
                    availability.conflicting_tenant_id,
                )

        reservation = await self.store.reserve(request, self.claim_ttl_seconds)
        if reservation.outcome is ReservationOutcome.REPLAYED:
            add_span_event("provisioning.replayed", {"tenant_id": reservation.tenant.id})
            logger.info(
                "Provisioning replayed key=%s tenant=%s request_id=%s",
                key,
                reservation.tenant.id,
                request_id,
            )
            return ProvisioningResult(
                tenant_id=reservation.tenant.id,
                slug=reservation.tenant.slug,
                owner_id=reservation.ledger.owner_id or "",
                owner_email=reservation.ledger.owner_email,
                password=None,
                replayed=True,
                idempotency_key=key,
            )
        return await self._complete_identity_step(reservation, request)

    async def _complete_identity_step(
        self, reservation: Reservation, request: ProvisioningRequest
    ) -> ProvisioningResult:
        ledger = reservation.ledger
        tenant = reservation.tenant
        claim_token = reservation.claim_token
        if claim_token is None:
            raise ProvisioningFailedException("Reservation holds no claim")

        password = generate_secure_password(self.password_length)
        try:
            owner = await self._ensure_owner_identity(reservation, request, password)
        except IdentityConflictError as e:
            await self.store.fail(
                ledger.id, claim_token, f"owner email belongs to another account ({e.provider_code})"
            )
            raise EmailUnavailableException(
                ledger.owner_email, "Email is already registered to another account"
            ) from e
        except IdentityProviderError as e:
            await self.store.release(ledger.id, claim_token, e.message)
            logger.warning(
                "Owner identity creation failed key=%s tenant=%s transient=%s: %s",
                ledger.idempotency_key,
                tenant.id,
                e.transient,
                e.reason,
            )
            raise AuthUserCreationFailedException(
                ledger.idempotency_key, tenant.id, e.reason
            ) from e

        try:
            activated = await self.store.complete(ledger.id, claim_token, owner.id)
        except TenantOpsException:
            raise
        except Exception as e:
            logger.exception(
                "Tenant activation failed after owner creation key=%s", ledger.idempotency_key
            )
            raise ProvisioningFailedException(
                "Owner account created but tenant activation failed; "
                "retry with the same idempotency key",
                retryable=True,
                details={"idempotency_key": ledger.idempotency_key, "tenant_id": tenant.id},
            ) from e

        logger.info(
            "Tenant provisioned key=%s tenant=%s slug=%s outcome=%s request_id=%s",
            ledger.idempotency_key,
            activated.id,
            activated.slug,
            reservation.outcome.value,
            request.request_id,
        )
        return ProvisioningResult(
            tenant_id=activated.id,
            slug=activated.slug,
            owner_id=owner.id,
            owner_email=ledger.owner_email,
            password=password,
            replayed=False,
            idempotency_key=ledger.idempotency_key,
        )

    async def _ensure_owner_identity(
        self, reservation: Reservation, request: ProvisioningRequest, password: str
    ) -> IdentityUser:
        """Create the owner identity with the planned id, or adopt one an earlier attempt created."""
        ledger = reservation.ledger
        tenant = reservation.tenant
        if reservation.outcome is ReservationOutcome.RESUMED:
            earlier = await self.identity_provider.get_user(ledger.planned_owner_id)
            if earlier is not None:
                return await self._adopt(earlier, ledger, password)
        metadata = {
            "role": OWNER_ROLE,
            "tenant_id": tenant.id,
            "tenant_slug": tenant.slug,
            "name": request.owner_name or tenant.name,
        }
        try:
            return await self.identity_provider.create_user(
                ledger.planned_owner_id, ledger.owner_email, password, metadata
            )
        except IdentityConflictError:
            earlier = await self.identity_provider.get_user(ledger.planned_owner_id)
            if earlier is None:
                raise
            return await self._adopt(earlier, ledger, password)

    async def _adopt(
        self, user: IdentityUser, ledger: LedgerEntry, password: str
    ) -> IdentityUser:
        if normalize_email(user.email) != ledger.owner_email:
            raise IdentityConflictError(
                "adopt_user", "planned identity id is bound to a different email"
            )
        logger.info(
            "Adopting owner identity from earlier attempt key=%s user=%s",
            ledger.idempotency_key,
            user.id,
        )
        await self.identity_provider.update_user(user.id, password=password)
        return user

    async def get_ledger_entry(self, idempotency_key: str) -> LedgerEntry:
        """Return the live ledger entry for a key (for admin retry tooling)."""
        entry = await self.store.get_by_idempotency_key(idempotency_key)
        if entry is None:
            raise ResourceNotFoundException("provisioning_request", idempotency_key)
        return entry
