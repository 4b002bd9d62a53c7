"""Password-setup link store (Postgres).

Issued links double as rate-limit events: record_issue counts links per
tenant and per issuing admin inside one transaction that holds advisory
locks on both keys, so concurrent issuers cannot both squeeze under a limit.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tenantops.application.dtos.setup_link import (
    NewSetupLink,
    RateLimitPolicy,
    RateLimitSnapshot,
    SetupLinkRecord,
)
from tenantops.domain.enums import SetupLinkMode
from tenantops.infrastructure.persistence.models.password_setup_link import (
    PasswordSetupLink,
)
from tenantops.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


def link_to_record(row: PasswordSetupLink) -> SetupLinkRecord:
    """Map ORM PasswordSetupLink to application SetupLinkRecord."""
    return SetupLinkRecord(
        id=row.id,
        tenant_id=row.tenant_id,
        email=row.email,
        mode=SetupLinkMode(row.mode),
        created_by=row.created_by,
        expires_at=ensure_utc(row.expires_at),
        used=row.used,
        used_at=ensure_utc(row.used_at),
        created_at=row.created_at,
    )


class SetupLinkStore:
    """Create, look up and consume password-setup links."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @staticmethod
    async def _count_since(
        session: AsyncSession, column, value: str, since: datetime
    ) -> int:
        result = await session.execute(
            select(func.count())
            .select_from(PasswordSetupLink)
            .where(column == value)
            .where(PasswordSetupLink.created_at > since)
        )
        return int(result.scalar_one())

    async def record_issue(
        self, link: NewSetupLink, policy: RateLimitPolicy
    ) -> RateLimitSnapshot:
        now = utc_now()
        async with self._session_factory() as session:
            async with session.begin():
                # Fixed order (tenant, then admin) so two issuers never deadlock.
                for lock_key in (
                    f"setup-link-tenant:{link.tenant_id}",
                    f"setup-link-admin:{link.created_by}",
                ):
                    await session.execute(
                        select(func.pg_advisory_xact_lock(func.hashtext(lock_key)))
                    )
                tenant_count = await self._count_since(
                    session,
                    PasswordSetupLink.tenant_id,
                    link.tenant_id,
                    now - timedelta(seconds=policy.tenant_window_seconds),
                )
                admin_count = await self._count_since(
                    session,
                    PasswordSetupLink.created_by,
                    link.created_by,
                    now - timedelta(seconds=policy.admin_window_seconds),
                )
                limited_reason: str | None = None
                if tenant_count >= policy.tenant_limit:
                    limited_reason = "tenant"
                elif admin_count >= policy.admin_limit:
                    limited_reason = "admin"
                if limited_reason is None:
                    session.add(
                        PasswordSetupLink(
                            token_hash=link.token_hash,
                            tenant_id=link.tenant_id,
                            email=link.email,
                            mode=link.mode.value,
                            created_by=link.created_by,
                            expires_at=link.expires_at,
                            used=False,
                            created_at=now,
                        )
                    )
                    await session.flush()
                    tenant_count += 1
                    admin_count += 1
        return RateLimitSnapshot(
            tenant_count=tenant_count,
            tenant_limit=policy.tenant_limit,
            tenant_window_seconds=policy.tenant_window_seconds,
            admin_count=admin_count,
            admin_limit=policy.admin_limit,
            admin_window_seconds=policy.admin_window_seconds,
            limited=limited_reason is not None,
            limited_reason=limited_reason,
        )

    async def get_by_token_hash(self, token_hash: str) -> SetupLinkRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(PasswordSetupLink).where(PasswordSetupLink.token_hash == token_hash)
            )
            row = result.scalar_one_or_none()
            return link_to_record(row) if row else None

    async def mark_used(self, link_id: str, used_at: datetime) -> bool:
        """Conditional flip of used; exactly one concurrent caller gets True."""
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    update(PasswordSetupLink)
                    .where(PasswordSetupLink.id == link_id)
                    .where(PasswordSetupLink.used.is_(False))
                    .values(used=True, used_at=used_at)
                    .returning(PasswordSetupLink.id)
                )
                flipped = result.scalar_one_or_none() is not None
        if not flipped:
            logger.info("Setup link %s was already consumed", link_id)
        return flipped
