"""HTTP tests for /api/v1/setup-links."""

from datetime import timedelta

from httpx import AsyncClient

from tenantops.application.dtos.setup_link import SetupLinkRecord
from tenantops.domain.enums import SetupLinkMode, TenantStatus
from tenantops.shared.utils.datetime import utc_now
from tenantops.shared.utils.generators import hash_token
from tests.fakes import FakeDatabase, FakeEmailSender, FakeSetupLinkStore

URL = "/api/v1/setup-links"


async def test_issue_link(
    client: AsyncClient,
    admin_headers: dict[str, str],
    fake_db: FakeDatabase,
    email_sender: FakeEmailSender,
) -> None:
    tenant = fake_db.add_tenant(owner_email="owner@example.com")
    response = await client.post(URL, json={"tenantId": tenant.id}, headers=admin_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["mode"] == "invite"
    assert body["emailSent"] is True
    assert body["message"] == "Setup link sent to owner@example.com"
    assert body["rateLimit"]["tenantRemaining"] == 4
    assert len(email_sender.sent) == 1


async def test_issue_link_rate_limited(
    client: AsyncClient, admin_headers: dict[str, str], fake_db: FakeDatabase
) -> None:
    tenant = fake_db.add_tenant(owner_email="owner@example.com")
    for _ in range(5):
        ok = await client.post(URL, json={"tenantId": tenant.id, "sendEmail": False}, headers=admin_headers)
        assert ok.status_code == 201
    limited = await client.post(URL, json={"tenantId": tenant.id, "sendEmail": False}, headers=admin_headers)
    assert limited.status_code == 429
    error = limited.json()["error"]
    assert error["code"] == "RATE_LIMITED"
    assert error["details"]["reason"] == "tenant"


async def test_issue_link_no_owner_email(
    client: AsyncClient, admin_headers: dict[str, str], fake_db: FakeDatabase
) -> None:
    tenant = fake_db.add_tenant(owner_email=None)
    response = await client.post(URL, json={"tenantId": tenant.id}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "NO_OWNER_EMAIL"


async def test_issue_link_unknown_tenant(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await client.post(URL, json={"tenantId": "missing"}, headers=admin_headers)
    assert response.status_code == 404


async def test_issue_link_pending_tenant_conflict(
    client: AsyncClient, admin_headers: dict[str, str], fake_db: FakeDatabase
) -> None:
    tenant = fake_db.add_tenant(owner_email="owner@example.com", status=TenantStatus.PENDING)
    response = await client.post(URL, json={"tenantId": tenant.id}, headers=admin_headers)
    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "TENANT_NOT_ACTIVE"
    assert error["details"]["status"] == "pending"


async def test_validate_is_public_and_single_use(
    client: AsyncClient, fake_db: FakeDatabase, link_store: FakeSetupLinkStore
) -> None:
    tenant = fake_db.add_tenant(owner_email="owner@example.com", slug="demo-bistro")
    link_store.put(
        hash_token("tok-1"),
        SetupLinkRecord(
            id="l1",
            tenant_id=tenant.id,
            email="owner@example.com",
            mode=SetupLinkMode.INVITE,
            created_by="a",
            expires_at=utc_now() + timedelta(hours=1),
        ),
    )

    checked = await client.post(f"{URL}/validate", json={"linkToken": "tok-1"})
    assert checked.status_code == 200
    assert checked.json()["valid"] is True
    assert checked.json()["tenant"]["slug"] == "demo-bistro"

    consumed = await client.post(f"{URL}/validate", json={"linkToken": "tok-1", "action": "consume"})
    assert consumed.status_code == 200
    assert consumed.json()["consumed"] is True

    reused = await client.post(f"{URL}/validate", json={"linkToken": "tok-1", "action": "consume"})
    assert reused.status_code == 400
    assert reused.json() == {
        "valid": False,
        "used": True,
        "expiresAt": reused.json()["expiresAt"],
        "message": "Link has already been used",
    }


async def test_validate_expired_and_unknown(
    client: AsyncClient, fake_db: FakeDatabase, link_store: FakeSetupLinkStore
) -> None:
    tenant = fake_db.add_tenant(owner_email="owner@example.com")
    link_store.put(
        hash_token("old"),
        SetupLinkRecord(
            id="l2",
            tenant_id=tenant.id,
            email="owner@example.com",
            mode=SetupLinkMode.RECOVERY,
            created_by="a",
            expires_at=utc_now() - timedelta(minutes=1),
        ),
    )
    expired = await client.post(f"{URL}/validate", json={"linkToken": "old"})
    assert expired.status_code == 400
    assert expired.json()["expired"] is True

    unknown = await client.post(f"{URL}/validate", json={"linkToken": "never-issued"})
    assert unknown.status_code == 404
    assert unknown.json()["valid"] is False
