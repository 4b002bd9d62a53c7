"""Tenant repository integration tests. Require Postgres; session is rolled back after each test."""

import pytest
from sqlalchemy.exc import IntegrityError

from tenantops.application.dtos.tenant import TenantChanges
from tenantops.domain.enums import TenantStatus
from tenantops.infrastructure.persistence.models import Tenant
from tenantops.infrastructure.persistence.repositories import TenantRepository


async def _add(db_session, **fields) -> Tenant:
    fields.setdefault("name", "Repo Tenant")
    fields.setdefault("status", TenantStatus.ACTIVE.value)
    tenant = Tenant(**fields)
    db_session.add(tenant)
    await db_session.flush()
    return tenant


@pytest.mark.requires_db
async def test_archived_tenant_releases_slug_and_email(db_session) -> None:
    """Live lookups ignore archived rows, and the partial indexes allow reuse."""
    repo = TenantRepository(db_session)
    old = await _add(db_session, slug="reused", owner_email="o@example.com")
    assert await repo.slug_in_use("reused")
    assert (await repo.find_live_by_owner_email("o@example.com")) is not None

    await repo.update_status(old.id, TenantStatus.ARCHIVED)
    assert not await repo.slug_in_use("reused")
    assert await repo.find_live_by_owner_email("o@example.com") is None

    fresh = await _add(db_session, slug="reused", owner_email="o@example.com")
    assert fresh.id != old.id


@pytest.mark.requires_db
async def test_live_slug_is_unique(db_session) -> None:
    await _add(db_session, slug="only-one")
    with pytest.raises(IntegrityError):
        await _add(db_session, slug="only-one")


@pytest.mark.requires_db
async def test_update_profile_and_list(db_session) -> None:
    repo = TenantRepository(db_session)
    tenant = await _add(db_session, slug="profile-me")
    updated = await repo.update_profile(tenant.id, TenantChanges(name="Renamed", currency="EUR"))
    assert updated is not None
    assert updated.name == "Renamed"
    assert updated.currency == "EUR"

    page = await repo.list_tenants(status=TenantStatus.ACTIVE)
    assert page.total >= 1
    assert any(t.id == tenant.id for t in page.items)
    assert await repo.get_by_id("missing") is None
