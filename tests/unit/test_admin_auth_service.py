"""Unit tests for AdminAuthService."""

from typing import Any

import pytest

from tenantops.application.dtos.identity import AdminUserResult
from tenantops.application.services import AdminAuthService
from tenantops.domain.enums import AdminRole
from tenantops.domain.exceptions import AuthenticationException, AuthorizationException
from tenantops.infrastructure.exceptions import IdentityProviderUnavailableError
from tests.conftest import ADMIN_USER_ID
from tests.fakes import FakeAdminRepository, FakeIdentityProvider


def _verifier(token: str) -> dict[str, Any]:
    if token != "good":
        raise ValueError("Invalid token")
    return {"sub": ADMIN_USER_ID, "email": "ops@platform.example"}


async def test_verifier_path_returns_principal(
    identity: FakeIdentityProvider, admin_repo: FakeAdminRepository
) -> None:
    principal = await AdminAuthService(identity, admin_repo, _verifier).authenticate("good")
    assert principal.user_id == ADMIN_USER_ID
    assert principal.role is AdminRole.ADMIN
    assert not identity.calls


async def test_missing_or_bad_token(
    identity: FakeIdentityProvider, admin_repo: FakeAdminRepository
) -> None:
    service = AdminAuthService(identity, admin_repo, _verifier)
    with pytest.raises(AuthenticationException):
        await service.authenticate(None)
    with pytest.raises(AuthenticationException):
        await service.authenticate("bad")


async def test_provider_path(identity: FakeIdentityProvider, admin_repo: FakeAdminRepository) -> None:
    identity.add_user("ops@platform.example", user_id=ADMIN_USER_ID)
    identity.tokens["opaque"] = ADMIN_USER_ID
    service = AdminAuthService(identity, admin_repo)

    principal = await service.authenticate("opaque")
    assert principal.email == "ops@platform.example"

    with pytest.raises(AuthenticationException):
        await service.authenticate("unknown")

    identity.fail_next["get_user_for_token"] = [
        IdentityProviderUnavailableError("get_user_for_token", "timeout")
    ]
    with pytest.raises(AuthenticationException):
        await service.authenticate("opaque")


@pytest.mark.parametrize(
    "row",
    [
        None,
        AdminUserResult(id="a", user_id=ADMIN_USER_ID, email="x@y.z", role=AdminRole.SUPPORT, is_active=True),
        AdminUserResult(id="a", user_id=ADMIN_USER_ID, email="x@y.z", role=AdminRole.ADMIN, is_active=False),
    ],
)
async def test_non_admin_is_forbidden(identity: FakeIdentityProvider, row: AdminUserResult | None) -> None:
    repo = FakeAdminRepository({ADMIN_USER_ID: row} if row else {})
    with pytest.raises(AuthorizationException):
        await AdminAuthService(identity, repo, _verifier).authenticate("good")
