"""SetupLinkStore against PostgreSQL."""

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tenantops.application.dtos.setup_link import NewSetupLink, RateLimitPolicy
from tenantops.domain.enums import SetupLinkMode
from tenantops.infrastructure.persistence.models import Tenant
from tenantops.infrastructure.persistence.repositories import SetupLinkStore
from tenantops.shared.utils.datetime import utc_now

POLICY = RateLimitPolicy(tenant_limit=2, tenant_window_seconds=3600, admin_limit=10, admin_window_seconds=3600)


async def _tenant(session_factory: async_sessionmaker[AsyncSession]) -> str:
    async with session_factory() as session:
        async with session.begin():
            tenant = Tenant(name="Demo", slug="demo-links", owner_email="o@example.com", status="active")
            session.add(tenant)
            await session.flush()
            return tenant.id


def _link(tenant_id: str, token_hash: str) -> NewSetupLink:
    return NewSetupLink(
        token_hash=token_hash,
        tenant_id=tenant_id,
        email="o@example.com",
        mode=SetupLinkMode.INVITE,
        created_by="admin-1",
        expires_at=utc_now() + timedelta(hours=48),
    )


@pytest.mark.requires_db
async def test_rate_limit_counts_and_rejects(session_factory: async_sessionmaker[AsyncSession]) -> None:
    store = SetupLinkStore(session_factory)
    tenant_id = await _tenant(session_factory)

    first = await store.record_issue(_link(tenant_id, "h1"), POLICY)
    second = await store.record_issue(_link(tenant_id, "h2"), POLICY)
    third = await store.record_issue(_link(tenant_id, "h3"), POLICY)

    assert (first.tenant_count, second.tenant_count) == (1, 2)
    assert third.limited and third.limited_reason == "tenant"
    assert await store.get_by_token_hash("h3") is None


@pytest.mark.requires_db
async def test_mark_used_only_once(session_factory: async_sessionmaker[AsyncSession]) -> None:
    store = SetupLinkStore(session_factory)
    tenant_id = await _tenant(session_factory)
    await store.record_issue(_link(tenant_id, "hx"), POLICY)
    record = await store.get_by_token_hash("hx")
    assert record is not None and not record.used

    flips = await asyncio.gather(
        store.mark_used(record.id, utc_now()), store.mark_used(record.id, utc_now())
    )
    assert sorted(flips) == [False, True]
    after = await store.get_by_token_hash("hx")
    assert after is not None and after.used and after.used_at is not None
