"""Admin authentication dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tenantops.api.v1.dependencies.db import get_admin_user_repo
from tenantops.api.v1.dependencies.external import get_identity_provider
from tenantops.application.dtos.identity import AdminPrincipal
from tenantops.application.interfaces.repositories import IAdminUserRepository
from tenantops.application.interfaces.services import IIdentityProvider
from tenantops.application.services import AdminAuthService
from tenantops.core.config import get_settings
from tenantops.infrastructure.security import verify_access_token

_http_bearer = HTTPBearer(auto_error=False)


def get_admin_auth_service(
    identity_provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    admin_repo: Annotated[IAdminUserRepository, Depends(get_admin_user_repo)],
) -> AdminAuthService:
    """Local JWT verification when AUTH_JWT_SECRET is set, else the provider's /user."""
    settings = get_settings()
    verifier = verify_access_token if settings.auth_jwt_secret is not None else None
    return AdminAuthService(identity_provider, admin_repo, verifier)


async def get_current_admin(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    auth_service: Annotated[AdminAuthService, Depends(get_admin_auth_service)],
) -> AdminPrincipal:
    """Return the calling admin; 401 without a valid bearer, 403 for non-admins."""
    token = credentials.credentials if credentials else None
    admin = await auth_service.authenticate(token)
    request.state.admin_user_id = admin.user_id
    return admin


def get_request_id(request: Request) -> str | None:
    """Request ID set by RequestIDMiddleware."""
    return getattr(request.state, "request_id", None)
