"""HTTP tests for POST /api/v1/tenants/provision and the provisioning status route."""

from typing import Any

from httpx import AsyncClient

from tenantops.infrastructure.exceptions import IdentityProviderUnavailableError
from tests.fakes import FakeDatabase, FakeIdentityProvider

URL = "/api/v1/tenants/provision"


def _body(**owner: Any) -> dict[str, Any]:
    return {
        "basics": {"name": "Demo Bistro", "slug": "Demo Bistro!!", "currency": "eur"},
        "owner": {"email": "owner@example.com", "name": "Ana", **owner},
        "idempotencyKey": "idem-1",
    }


async def test_provision_requires_admin(client: AsyncClient) -> None:
    """No bearer token returns 401 in the error envelope."""
    response = await client.post(URL, json=_body())
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "UNAUTHORIZED"
    assert body["error"]["requestId"]


async def test_provision_success_then_replay(
    client: AsyncClient, admin_headers: dict[str, str], fake_db: FakeDatabase
) -> None:
    """201 with a one-time password, then 200 with password null for the same key."""
    first = await client.post(URL, json=_body(), headers=admin_headers)
    assert first.status_code == 201
    data = first.json()["data"]
    assert data["slug"] == "demo-bistro"
    assert data["replayed"] is False
    assert data["ownerCredentials"]["email"] == "owner@example.com"
    assert data["ownerCredentials"]["password"]
    assert data["ownerCredentials"]["temporaryPassword"] is True

    second = await client.post(URL, json=_body(), headers=admin_headers)
    assert second.status_code == 200
    replay = second.json()["data"]
    assert replay["tenantId"] == data["tenantId"]
    assert replay["replayed"] is True
    assert replay["ownerCredentials"]["password"] is None
    assert fake_db.tenant_inserts == 1


async def test_provision_echoes_request_id(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await client.post(
        URL, json=_body(), headers={**admin_headers, "X-Request-ID": "req-abc_123"}
    )
    assert response.headers["x-request-id"] == "req-abc_123"
    assert response.json()["requestId"] == "req-abc_123"


async def test_missing_owner_email(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await client.post(URL, json=_body(email=""), headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "OWNER_EMAIL_REQUIRED"


async def test_reserved_slug(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    body = _body()
    body["basics"]["slug"] = "Admin"
    response = await client.post(URL, json=body, headers=admin_headers)
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_SLUG"
    assert error["details"]["rule"] == "reserved"


async def test_schema_violation_is_400_with_fields(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await client.post(URL, json={"owner": {}}, headers=admin_headers)
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any(f["field"].startswith("basics") for f in error["details"]["fields"])


async def test_duplicate_slug_is_409(
    client: AsyncClient, admin_headers: dict[str, str], fake_db: FakeDatabase
) -> None:
    fake_db.add_tenant(slug="demo-bistro", owner_email="someone@example.com")
    response = await client.post(URL, json=_body(), headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_SLUG"


async def test_email_in_use_is_409(
    client: AsyncClient, admin_headers: dict[str, str], identity: FakeIdentityProvider
) -> None:
    identity.add_user("owner@example.com")
    response = await client.post(URL, json=_body(), headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_UNAVAILABLE"


async def test_identity_failure_then_status_then_resume(
    client: AsyncClient, admin_headers: dict[str, str], identity: FakeIdentityProvider
) -> None:
    """AUTH_USER_CREATION_FAILED is retryable; the status route shows the pending entry."""
    identity.fail_next["create_user"] = [IdentityProviderUnavailableError("create_user", "timeout")]
    failed = await client.post(URL, json=_body(), headers=admin_headers)
    assert failed.status_code == 500
    error = failed.json()["error"]
    assert error["code"] == "AUTH_USER_CREATION_FAILED"
    assert error["details"]["retryable"] is True

    status = await client.get("/api/v1/tenants/provisioning/idem-1", headers=admin_headers)
    assert status.status_code == 200
    assert status.json()["status"] == "pending"
    assert status.json()["attempts"] == 1

    resumed = await client.post(URL, json=_body(), headers=admin_headers)
    assert resumed.status_code == 201
    assert resumed.json()["data"]["tenantId"] == error["details"]["tenant_id"]


async def test_unknown_idempotency_key_is_404(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await client.get("/api/v1/tenants/provisioning/nope", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_second_tenant_with_bound_owner_email_is_rejected(
    client: AsyncClient, admin_headers: dict[str, str], fake_db: FakeDatabase
) -> None:
    """Owner email already bound to a tenant: EMAIL_UNAVAILABLE and no tenant created."""
    first = await client.post(URL, json=_body(), headers=admin_headers)
    assert first.json()["data"]["slug"] == "demo-bistro"

    body = _body()
    body["basics"]["slug"] = "second-bistro"
    body["idempotencyKey"] = "idem-2"
    second = await client.post(URL, json=body, headers=admin_headers)

    assert second.status_code == 409
    assert second.json()["error"]["code"] == "EMAIL_UNAVAILABLE"
    assert fake_db.tenant_inserts == 1
