"""Provisioning ledger store (Postgres).

reserve() is the atomic provisioning transaction: under transaction-scoped
advisory locks on the idempotency key and the slug it either replays a
completed entry, resumes a pending one, or inserts ledger + tenant rows
together. Each method opens its own short transaction from the session
factory; no transaction is held across identity-provider calls.
"""

from __future__ import annotations

import logging
import secrets
from datetime import timedelta

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tenantops.application.dtos.provisioning import (
    LedgerEntry,
    ProvisioningRequest,
    Reservation,
)
from tenantops.application.dtos.tenant import TenantResult
from tenantops.domain.enums import (
    LedgerStatus,
    ProvisioningPhase,
    ReservationOutcome,
    TenantStatus,
)
from tenantops.domain.exceptions import (
    DuplicateRequestException,
    ProvisioningFailedException,
    ResourceNotFoundException,
    TenantOpsException,
)
from tenantops.infrastructure.persistence.constraints import (
    ConflictContext,
    sqlstate_of,
    translate_integrity_error,
)
from tenantops.infrastructure.persistence.models.provisioning_ledger import (
    ProvisioningLedger,
)
from tenantops.infrastructure.persistence.models.tenant import Tenant
from tenantops.infrastructure.persistence.repositories.tenant_repo import (
    tenant_to_result,
)
from tenantops.shared.utils.datetime import ensure_utc, utc_now
from tenantops.shared.utils.generators import generate_identity_id

logger = logging.getLogger(__name__)


def ledger_to_entry(row: ProvisioningLedger) -> LedgerEntry:
    """Map ORM ProvisioningLedger to application LedgerEntry."""
    return LedgerEntry(
        id=row.id,
        idempotency_key=row.idempotency_key,
        admin_user_id=row.admin_user_id,
        requested_slug=row.requested_slug,
        owner_email=row.owner_email,
        status=LedgerStatus(row.status),
        planned_owner_id=row.planned_owner_id,
        tenant_id=row.tenant_id,
        owner_id=row.owner_id,
        attempts=row.attempts,
        last_error=row.last_error,
        created_at=row.created_at,
        completed_at=row.completed_at,
    )


class ProvisioningStore:
    """Ledger + tenant persistence for the provisioning workflow."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @staticmethod
    async def _advisory_lock(session: AsyncSession, key: str) -> None:
        """Serialize on key until the current transaction ends."""
        await session.execute(select(func.pg_advisory_xact_lock(func.hashtext(key))))

    @staticmethod
    async def _live_entry(
        session: AsyncSession, idempotency_key: str, *, for_update: bool = False
    ) -> ProvisioningLedger | None:
        stmt = (
            select(ProvisioningLedger)
            .where(ProvisioningLedger.idempotency_key == idempotency_key)
            .where(ProvisioningLedger.status != LedgerStatus.FAILED.value)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def _tenant_for(session: AsyncSession, row: ProvisioningLedger) -> TenantResult:
        tenant = await session.get(Tenant, row.tenant_id) if row.tenant_id else None
        if tenant is None:
            raise ProvisioningFailedException(
                "Provisioning ledger entry has no tenant",
                details={"idempotency_key": row.idempotency_key},
            )
        return tenant_to_result(tenant)

    @staticmethod
    async def _tenant_left_pending(
        session: AsyncSession, row: ProvisioningLedger
    ) -> str | None:
        """Status of a pending entry's tenant once it is no longer PENDING, else None."""
        if row.status != LedgerStatus.PENDING.value or not row.tenant_id:
            return None
        status = (
            await session.execute(
                select(Tenant.status).where(Tenant.id == row.tenant_id).with_for_update()
            )
        ).scalar_one_or_none()
        if status is None or status == TenantStatus.PENDING.value:
            return None
        return status

    @staticmethod
    def _close_abandoned(row: ProvisioningLedger, tenant_status: str) -> None:
        """Fail a pending entry whose tenant left PENDING outside provisioning."""
        row.status = LedgerStatus.FAILED.value
        row.claim_token = None
        row.claimed_until = None
        row.last_error = f"tenant is {tenant_status}"

    @staticmethod
    def _abandoned_error(
        row: ProvisioningLedger, tenant_status: str
    ) -> ProvisioningFailedException:
        return ProvisioningFailedException(
            f"Tenant for this request is {tenant_status}; submit a new provisioning request",
            details={
                "idempotency_key": row.idempotency_key,
                "tenant_id": row.tenant_id,
                "tenant_status": tenant_status,
            },
        )

    @staticmethod
    def _log_phase(
        phase: ProvisioningPhase, request: ProvisioningRequest, **extra: object
    ) -> None:
        logger.debug(
            "Provisioning reservation phase=%s key=%s slug=%s request_id=%s %s",
            phase.value,
            request.idempotency_key,
            request.tenant.slug,
            request.request_id,
            extra or "",
        )

    async def get_by_idempotency_key(self, idempotency_key: str) -> LedgerEntry | None:
        async with self._session_factory() as session:
            row = await self._live_entry(session, idempotency_key)
            return ledger_to_entry(row) if row else None

    async def reserve(
        self, request: ProvisioningRequest, claim_ttl_seconds: int
    ) -> Reservation:
        """Create, resume or replay the ledger entry for request.idempotency_key.

        Raises:
            DuplicateRequestException: key held by a live claim or reused for a different request.
            DuplicateSlugException: a live tenant already has the slug.
            EmailUnavailableException: a live tenant already has the owner email.
            ProvisioningFailedException: database failure (retryable), or the pending
                entry's tenant was archived meanwhile (entry failed, key freed).
        """
        key = request.idempotency_key
        draft = request.tenant
        claim_token = secrets.token_hex(16)
        phase = ProvisioningPhase.NOT_STARTED
        abandoned: ProvisioningFailedException | None = None
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await self._advisory_lock(session, f"provisioning-key:{key}")
                    existing = await self._live_entry(session, key, for_update=True)
                    if existing is not None:
                        left_pending = await self._tenant_left_pending(session, existing)
                        if left_pending is not None:
                            # committed with this transaction; frees the key
                            self._close_abandoned(existing, left_pending)
                            abandoned = self._abandoned_error(existing, left_pending)
                        else:
                            reservation = await self._resolve_existing(
                                session, existing, request, claim_token, claim_ttl_seconds
                            )
                    else:
                        await self._advisory_lock(session, f"tenant-slug:{draft.slug}")
                        phase = ProvisioningPhase.SLUG_LOCKED
                        self._log_phase(phase, request)

                        ledger = ProvisioningLedger(
                            idempotency_key=key,
                            admin_user_id=request.admin_user_id,
                            requested_slug=draft.slug,
                            owner_email=draft.owner_email,
                            planned_owner_id=generate_identity_id(),
                            status=LedgerStatus.PENDING.value,
                            claim_token=claim_token,
                            claimed_until=utc_now() + timedelta(seconds=claim_ttl_seconds),
                            attempts=1,
                            request_data={
                                "name": draft.name,
                                "slug": draft.slug,
                                "owner_email": draft.owner_email,
                                "owner_name": request.owner_name,
                                "request_id": request.request_id,
                            },
                        )
                        session.add(ledger)
                        await session.flush()
                        phase = ProvisioningPhase.LEDGER_INSERTED
                        self._log_phase(phase, request, ledger_id=ledger.id)

                        tenant = Tenant(
                            name=draft.name,
                            slug=draft.slug,
                            timezone=draft.timezone,
                            currency=draft.currency,
                            contact_email=draft.contact_email,
                            phone=draft.phone,
                            website=draft.website,
                            description=draft.description,
                            address=draft.address,
                            owner_email=draft.owner_email,
                            status=TenantStatus.PENDING.value,
                        )
                        session.add(tenant)
                        await session.flush()
                        phase = ProvisioningPhase.TENANT_INSERTED
                        self._log_phase(phase, request, tenant_id=tenant.id)

                        ledger.tenant_id = tenant.id
                        await session.flush()
                        await session.refresh(tenant)
                        await session.refresh(ledger)
                        reservation = Reservation(
                            outcome=ReservationOutcome.CREATED,
                            ledger=ledger_to_entry(ledger),
                            tenant=tenant_to_result(tenant),
                            claim_token=claim_token,
                        )
        except IntegrityError as e:
            self._log_phase(ProvisioningPhase.ROLLED_BACK, request, failed_after=phase.value)
            translated = translate_integrity_error(
                e,
                ConflictContext(
                    slug=draft.slug, email=draft.owner_email, idempotency_key=key
                ),
            )
            if translated is not None:
                raise translated from e
            logger.error(
                "Unmapped integrity error during provisioning key=%s sqlstate=%s: %s",
                key,
                sqlstate_of(e),
                e,
            )
            raise ProvisioningFailedException(
                "Tenant could not be reserved", details={"idempotency_key": key}
            ) from e
        except TenantOpsException:
            self._log_phase(ProvisioningPhase.ROLLED_BACK, request, failed_after=phase.value)
            raise
        except SQLAlchemyError as e:
            self._log_phase(ProvisioningPhase.ROLLED_BACK, request, failed_after=phase.value)
            logger.exception("Database error during provisioning key=%s", key)
            raise ProvisioningFailedException(
                "Database error while reserving tenant; retry the request",
                retryable=True,
                details={"idempotency_key": key},
            ) from e

        if abandoned is not None:
            logger.warning(
                "Closed provisioning entry key=%s: %s", key, abandoned.message
            )
            raise abandoned
        self._log_phase(
            ProvisioningPhase.COMMITTED,
            request,
            outcome=reservation.outcome.value,
            tenant_id=reservation.tenant.id,
        )
        return reservation

    async def _resolve_existing(
        self,
        session: AsyncSession,
        row: ProvisioningLedger,
        request: ProvisioningRequest,
        claim_token: str,
        claim_ttl_seconds: int,
    ) -> Reservation:
        key = request.idempotency_key
        entry = ledger_to_entry(row)
        if entry.status is LedgerStatus.COMPLETED:
            return Reservation(
                outcome=ReservationOutcome.REPLAYED,
                ledger=entry,
                tenant=await self._tenant_for(session, row),
            )
        if not entry.matches(request):
            raise DuplicateRequestException(
                key, "idempotency key was already used for a different tenant"
            )
        now = utc_now()
        claimed_until = ensure_utc(row.claimed_until)
        if row.claim_token and claimed_until is not None and claimed_until > now:
            raise DuplicateRequestException(
                key, "a request with this idempotency key is already in progress"
            )
        row.claim_token = claim_token
        row.claimed_until = now + timedelta(seconds=claim_ttl_seconds)
        row.attempts = row.attempts + 1
        await session.flush()
        return Reservation(
            outcome=ReservationOutcome.RESUMED,
            ledger=ledger_to_entry(row),
            tenant=await self._tenant_for(session, row),
            claim_token=claim_token,
        )

    async def complete(
        self, ledger_id: str, claim_token: str, owner_id: str
    ) -> TenantResult:
        """Back-fill owner and activate tenant. Re-running with the same owner is a no-op.

        A tenant archived while the identity step ran is not revived: the entry
        is failed (freeing the key) and ProvisioningFailedException is raised.
        """
        abandoned: ProvisioningFailedException | None = None
        async with self._session_factory() as session:
            async with session.begin():
                row = (
                    await session.execute(
                        select(ProvisioningLedger)
                        .where(ProvisioningLedger.id == ledger_id)
                        .with_for_update()
                    )
                ).scalar_one_or_none()
                if row is None:
                    raise ResourceNotFoundException("provisioning_ledger", ledger_id)
                if row.status == LedgerStatus.COMPLETED.value:
                    if row.owner_id != owner_id:
                        raise ProvisioningFailedException(
                            "Provisioning already completed with a different owner",
                            details={"idempotency_key": row.idempotency_key},
                        )
                    return await self._tenant_for(session, row)
                if row.status == LedgerStatus.FAILED.value:
                    raise ProvisioningFailedException(
                        "Provisioning request already failed",
                        details={"idempotency_key": row.idempotency_key},
                    )
                if row.claim_token != claim_token:
                    raise DuplicateRequestException(
                        row.idempotency_key, "claim was taken over by another request"
                    )
                tenant = (
                    await session.execute(
                        select(Tenant).where(Tenant.id == row.tenant_id).with_for_update()
                    )
                ).scalar_one_or_none()
                if tenant is None or tenant.owner_id not in (None, owner_id):
                    raise ProvisioningFailedException(
                        "Tenant is bound to a different owner",
                        details={"idempotency_key": row.idempotency_key},
                    )
                if tenant.status != TenantStatus.PENDING.value:
                    self._close_abandoned(row, tenant.status)
                    abandoned = self._abandoned_error(row, tenant.status)
                else:
                    tenant.owner_id = owner_id
                    tenant.status = TenantStatus.ACTIVE.value
                    row.owner_id = owner_id
                    row.status = LedgerStatus.COMPLETED.value
                    row.completed_at = utc_now()
                    row.claim_token = None
                    row.claimed_until = None
                    row.last_error = None
                    await session.flush()
                    await session.refresh(tenant)
                    result = tenant_to_result(tenant)
        if abandoned is not None:
            logger.warning(
                "Owner identity %s created for tenant that left pending key=%s",
                owner_id,
                row.idempotency_key,
            )
            raise abandoned
        logger.info(
            "Provisioning completed key=%s tenant=%s owner=%s",
            row.idempotency_key,
            result.id,
            owner_id,
        )
        return result

    async def release(self, ledger_id: str, claim_token: str, error: str) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(
                    update(ProvisioningLedger)
                    .where(ProvisioningLedger.id == ledger_id)
                    .where(ProvisioningLedger.claim_token == claim_token)
                    .where(ProvisioningLedger.status == LedgerStatus.PENDING.value)
                    .values(claim_token=None, claimed_until=None, last_error=error[:2000])
                )

    async def fail(self, ledger_id: str, claim_token: str, error: str) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    update(ProvisioningLedger)
                    .where(ProvisioningLedger.id == ledger_id)
                    .where(ProvisioningLedger.claim_token == claim_token)
                    .where(ProvisioningLedger.status == LedgerStatus.PENDING.value)
                    .values(
                        status=LedgerStatus.FAILED.value,
                        claim_token=None,
                        claimed_until=None,
                        last_error=error[:2000],
                    )
                    .returning(ProvisioningLedger.tenant_id)
                )
                tenant_id = result.scalar_one_or_none()
                if tenant_id is not None:
                    await session.execute(
                        update(Tenant)
                        .where(Tenant.id == tenant_id)
                        .where(Tenant.owner_id.is_(None))
                        .values(status=TenantStatus.ARCHIVED.value)
                    )
        logger.warning("Provisioning failed permanently ledger=%s: %s", ledger_id, error)
