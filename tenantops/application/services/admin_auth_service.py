"""Resolve a bearer credential to an authorized platform administrator."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from tenantops.application.dtos.identity import AdminPrincipal
from tenantops.application.interfaces.repositories import IAdminUserRepository
from tenantops.application.interfaces.services import IIdentityProvider
from tenantops.domain.enums import AdminRole
from tenantops.domain.exceptions import AuthenticationException, AuthorizationException
from tenantops.infrastructure.exceptions import IdentityProviderError

logger = logging.getLogger(__name__)

TokenVerifier = Callable[[str], dict[str, Any]]


class AdminAuthService:
    """Authenticate the caller, then require an active SUPER_ADMIN or ADMIN row.

    token_verifier (local JWT check) is used when given; otherwise the
    identity provider resolves the token.
    """

    def __init__(
        self,
        identity_provider: IIdentityProvider,
        admin_repo: IAdminUserRepository,
        token_verifier: TokenVerifier | None = None,
    ) -> None:
        self.identity_provider = identity_provider
        self.admin_repo = admin_repo
        self.token_verifier = token_verifier

    async def _resolve_user(self, token: str) -> tuple[str, str | None]:
        if self.token_verifier is not None:
            try:
                payload = self.token_verifier(token)
            except ValueError as e:
                raise AuthenticationException("Invalid or expired token") from e
            return str(payload["sub"]), payload.get("email")
        try:
            user = await self.identity_provider.get_user_for_token(token)
        except IdentityProviderError as e:
            logger.warning("Token verification via identity provider failed: %s", e.reason)
            raise AuthenticationException("Could not verify credentials") from e
        if user is None:
            raise AuthenticationException("Invalid or expired token")
        return user.id, user.email

    async def authenticate(self, token: str | None) -> AdminPrincipal:
        if not token:
            raise AuthenticationException()
        user_id, email = await self._resolve_user(token)
        admin = await self.admin_repo.get_active_by_user_id(user_id)
        if admin is None or admin.role not in AdminRole.tenant_managers():
            logger.info("Rejected non-admin caller user=%s", user_id)
            raise AuthorizationException()
        return AdminPrincipal(user_id=user_id, email=email or admin.email, role=admin.role)
