"""Unit tests for TenantAdminService."""

import pytest

from tenantops.application.dtos.tenant import TenantChanges
from tenantops.application.services import TenantAdminService
from tenantops.domain.enums import TenantStatus
from tenantops.domain.exceptions import (
    InvalidStatusTransitionException,
    TenantNotFoundException,
)
from tests.fakes import FakeDatabase, FakeTenantRepository


@pytest.fixture
def service(tenant_repo: FakeTenantRepository) -> TenantAdminService:
    return TenantAdminService(tenant_repo)


async def test_list_filters_by_status(service: TenantAdminService, fake_db: FakeDatabase) -> None:
    fake_db.add_tenant()
    fake_db.add_tenant(status=TenantStatus.SUSPENDED)
    page = await service.list_tenants(status=TenantStatus.SUSPENDED)
    assert page.total == 1
    assert page.items[0].status is TenantStatus.SUSPENDED


async def test_get_unknown_tenant(service: TenantAdminService) -> None:
    with pytest.raises(TenantNotFoundException):
        await service.get_tenant("missing")


async def test_update_cleans_fields(service: TenantAdminService, fake_db: FakeDatabase) -> None:
    tenant = fake_db.add_tenant(name="Old")
    updated = await service.update_tenant(
        tenant.id,
        TenantChanges(
            name="<i>New</i> Name",
            currency="gbp",
            contact_email=" Hello@Example.com ",
            address={"line1": "<b>1</b> Main St"},
        ),
    )
    assert updated.name == "New Name"
    assert updated.currency == "GBP"
    assert updated.contact_email == "hello@example.com"
    assert updated.address == {"line1": "1 Main St"}
    assert updated.slug == tenant.slug


@pytest.mark.parametrize(
    ("start", "target"),
    [
        (TenantStatus.ACTIVE, TenantStatus.SUSPENDED),
        (TenantStatus.SUSPENDED, TenantStatus.ACTIVE),
        (TenantStatus.PENDING, TenantStatus.ARCHIVED),
    ],
)
async def test_allowed_transitions(
    service: TenantAdminService, fake_db: FakeDatabase, start: TenantStatus, target: TenantStatus
) -> None:
    tenant = fake_db.add_tenant(status=start)
    updated = await service.change_status(tenant.id, target)
    assert updated.status is target


@pytest.mark.parametrize(
    ("start", "target"),
    [
        (TenantStatus.ARCHIVED, TenantStatus.ACTIVE),
        (TenantStatus.PENDING, TenantStatus.ACTIVE),
    ],
)
async def test_disallowed_transitions(
    service: TenantAdminService, fake_db: FakeDatabase, start: TenantStatus, target: TenantStatus
) -> None:
    tenant = fake_db.add_tenant(status=start)
    with pytest.raises(InvalidStatusTransitionException):
        await service.change_status(tenant.id, target)


async def test_same_status_is_noop(service: TenantAdminService, fake_db: FakeDatabase) -> None:
    tenant = fake_db.add_tenant(status=TenantStatus.ARCHIVED)
    assert (await service.change_status(tenant.id, TenantStatus.ARCHIVED)).status is TenantStatus.ARCHIVED


async def test_archive_releases_slug(service: TenantAdminService, fake_db: FakeDatabase) -> None:
    tenant = fake_db.add_tenant(slug="demo-bistro")
    assert (await service.check_slug_availability("Demo Bistro"))[1] is False
    await service.archive_tenant(tenant.id)
    assert await service.check_slug_availability("Demo Bistro") == ("demo-bistro", True, None)


async def test_slug_availability_reports_invalid_slug(service: TenantAdminService) -> None:
    slug, available, reason = await service.check_slug_availability("API")
    assert slug == "api"
    assert not available
    assert reason and "reserved" in reason
