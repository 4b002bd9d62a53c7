"""HTTP tests for tenant administration and credential routes."""

from httpx import AsyncClient

from tenantops.application.dtos.identity import AdminUserResult
from tenantops.domain.enums import AdminRole, TenantStatus
from tests.conftest import ADMIN_USER_ID
from tests.fakes import FakeAdminRepository, FakeDatabase, FakeIdentityProvider

BASE = "/api/v1/tenants"


async def test_support_role_is_forbidden(
    client: AsyncClient, admin_headers: dict[str, str], admin_repo: FakeAdminRepository
) -> None:
    admin_repo.admins[ADMIN_USER_ID] = AdminUserResult(
        id="adm1", user_id=ADMIN_USER_ID, email="ops@platform.example", role=AdminRole.SUPPORT, is_active=True
    )
    response = await client.get(BASE, headers=admin_headers)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


async def test_invalid_token_is_401(client: AsyncClient) -> None:
    response = await client.get(BASE, headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_list_and_get(
    client: AsyncClient, admin_headers: dict[str, str], fake_db: FakeDatabase
) -> None:
    tenant = fake_db.add_tenant(name="One")
    fake_db.add_tenant(name="Two", status=TenantStatus.SUSPENDED)

    listed = await client.get(BASE, params={"status": "suspended"}, headers=admin_headers)
    assert listed.status_code == 200
    assert listed.json()["total"] == 1
    assert listed.json()["items"][0]["name"] == "Two"

    got = await client.get(f"{BASE}/{tenant.id}", headers=admin_headers)
    assert got.status_code == 200
    assert got.json()["ownerEmail"] is None

    missing = await client.get(f"{BASE}/nope", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "TENANT_NOT_FOUND"


async def test_update_and_status_changes(
    client: AsyncClient, admin_headers: dict[str, str], fake_db: FakeDatabase
) -> None:
    tenant = fake_db.add_tenant()
    patched = await client.patch(
        f"{BASE}/{tenant.id}", json={"name": "Renamed", "currency": "gbp"}, headers=admin_headers
    )
    assert patched.status_code == 200
    assert patched.json()["name"] == "Renamed"
    assert patched.json()["currency"] == "GBP"

    suspended = await client.patch(
        f"{BASE}/{tenant.id}/status", json={"status": "suspended"}, headers=admin_headers
    )
    assert suspended.json()["status"] == "suspended"

    archived = await client.delete(f"{BASE}/{tenant.id}", headers=admin_headers)
    assert archived.json()["status"] == "archived"

    revived = await client.patch(
        f"{BASE}/{tenant.id}/status", json={"status": "active"}, headers=admin_headers
    )
    assert revived.status_code == 409
    assert revived.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"


async def test_slug_availability(
    client: AsyncClient, admin_headers: dict[str, str], fake_db: FakeDatabase
) -> None:
    fake_db.add_tenant(slug="taken-place")
    taken = await client.get(f"{BASE}/slug-availability", params={"slug": "Taken Place"}, headers=admin_headers)
    assert taken.json() == {"slug": "taken-place", "available": False, "reason": "Slug is already taken"}

    free = await client.get(f"{BASE}/slug-availability", params={"slug": "free-place"}, headers=admin_headers)
    assert free.json()["available"] is True


async def test_credentials_generate_password(
    client: AsyncClient,
    admin_headers: dict[str, str],
    fake_db: FakeDatabase,
    identity: FakeIdentityProvider,
) -> None:
    owner = identity.add_user("owner@example.com")
    tenant = fake_db.add_tenant(owner_email="owner@example.com", owner_id=owner.id)
    response = await client.post(
        f"{BASE}/{tenant.id}/credentials", json={"action": "generate_password"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["newPassword"] == identity.passwords[owner.id]


async def test_credentials_update_email_requires_new_email(
    client: AsyncClient, admin_headers: dict[str, str], fake_db: FakeDatabase
) -> None:
    tenant = fake_db.add_tenant(owner_email="owner@example.com", owner_id="u1")
    response = await client.post(
        f"{BASE}/{tenant.id}/credentials", json={"action": "update_email"}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
