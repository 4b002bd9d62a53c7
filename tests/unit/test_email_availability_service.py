"""Unit tests for EmailAvailabilityService."""

import pytest

from tenantops.application.services import EmailAvailabilityService
from tenantops.domain.enums import TenantStatus
from tenantops.domain.exceptions import EmailCheckFailedException, ValidationException
from tenantops.infrastructure.exceptions import IdentityProviderUnavailableError
from tests.fakes import FakeDatabase, FakeIdentityProvider, FakeTenantRepository


@pytest.fixture
def service(tenant_repo: FakeTenantRepository, identity: FakeIdentityProvider) -> EmailAvailabilityService:
    return EmailAvailabilityService(tenant_repo, identity)


async def test_free_email_is_available_and_normalized(service: EmailAvailabilityService) -> None:
    """An unused address is available and reported in normalized form."""
    result = await service.check("  New.Owner@Example.com ")
    assert result.available
    assert result.email == "new.owner@example.com"


async def test_email_bound_to_live_tenant_names_the_tenant(
    service: EmailAvailabilityService, fake_db: FakeDatabase
) -> None:
    """The reason names the tenant the email is assigned to."""
    tenant = fake_db.add_tenant(name="Demo Bistro", owner_email="owner@example.com")
    result = await service.check("OWNER@example.com")
    assert not result.available
    assert result.reason == 'Email is already assigned to tenant "Demo Bistro"'
    assert result.conflicting_tenant_id == tenant.id


async def test_email_of_archived_tenant_is_available(
    service: EmailAvailabilityService, fake_db: FakeDatabase
) -> None:
    """Archived tenants release their owner email."""
    fake_db.add_tenant(owner_email="owner@example.com", status=TenantStatus.ARCHIVED)
    assert (await service.check("owner@example.com")).available


async def test_email_with_existing_identity_is_unavailable(
    service: EmailAvailabilityService, identity: FakeIdentityProvider
) -> None:
    identity.add_user("taken@example.com")
    result = await service.check("taken@example.com")
    assert not result.available
    assert "existing account" in (result.reason or "")


async def test_system_email_is_unavailable(service: EmailAvailabilityService) -> None:
    result = await service.check("tenant-123@system.local")
    assert not result.available


async def test_identity_lookup_failure_is_never_available(
    service: EmailAvailabilityService, identity: FakeIdentityProvider
) -> None:
    """A failed lookup raises a retryable error instead of reporting available."""
    identity.fail_next["find_user_by_email"] = [
        IdentityProviderUnavailableError("find_user_by_email", "timeout")
    ]
    with pytest.raises(EmailCheckFailedException) as exc_info:
        await service.check("someone@example.com")
    assert exc_info.value.retryable


@pytest.mark.parametrize("bad", ["", "   ", "not-an-email"])
async def test_invalid_email_is_rejected(service: EmailAvailabilityService, bad: str) -> None:
    with pytest.raises(ValidationException):
        await service.check(bad)
