"""Application service dependencies (composition root).

Routes depend only on these; services receive repositories and adapters
built in db.py and external.py.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from tenantops.api.v1.dependencies.db import (
    get_provisioning_store,
    get_setup_link_store,
    get_tenant_repo,
    get_tenant_repo_for_write,
)
from tenantops.api.v1.dependencies.external import get_email_sender, get_identity_provider
from tenantops.application.dtos.setup_link import RateLimitPolicy
from tenantops.application.interfaces.repositories import (
    IProvisioningStore,
    ISetupLinkStore,
    ITenantRepository,
)
from tenantops.application.interfaces.services import IEmailSender, IIdentityProvider
from tenantops.application.services import (
    CredentialService,
    EmailAvailabilityService,
    ProvisioningService,
    SetupLinkService,
    TenantAdminService,
)
from tenantops.core.config import get_settings


def get_email_availability_service(
    tenant_repo: Annotated[ITenantRepository, Depends(get_tenant_repo)],
    identity_provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
) -> EmailAvailabilityService:
    return EmailAvailabilityService(tenant_repo, identity_provider)


def get_provisioning_service(
    store: Annotated[IProvisioningStore, Depends(get_provisioning_store)],
    email_checker: Annotated[EmailAvailabilityService, Depends(get_email_availability_service)],
    identity_provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
) -> ProvisioningService:
    settings = get_settings()
    return ProvisioningService(
        store,
        email_checker,
        identity_provider,
        claim_ttl_seconds=settings.provisioning_claim_ttl_seconds,
        password_length=settings.owner_password_length,
    )


def get_setup_link_service(
    tenant_repo: Annotated[ITenantRepository, Depends(get_tenant_repo)],
    link_store: Annotated[ISetupLinkStore, Depends(get_setup_link_store)],
    identity_provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    email_sender: Annotated[IEmailSender, Depends(get_email_sender)],
) -> SetupLinkService:
    settings = get_settings()
    policy = RateLimitPolicy(
        tenant_limit=settings.setup_link_tenant_limit,
        tenant_window_seconds=settings.setup_link_tenant_window_seconds,
        admin_limit=settings.setup_link_admin_limit,
        admin_window_seconds=settings.setup_link_admin_window_seconds,
    )
    return SetupLinkService(
        tenant_repo,
        link_store,
        identity_provider,
        email_sender,
        policy,
        ttl_hours=settings.setup_link_ttl_hours,
        default_redirect_url=settings.client_login_url,
    )


def get_credential_service(
    tenant_repo: Annotated[ITenantRepository, Depends(get_tenant_repo_for_write)],
    identity_provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
) -> CredentialService:
    settings = get_settings()
    return CredentialService(
        tenant_repo,
        identity_provider,
        EmailAvailabilityService(tenant_repo, identity_provider),
        password_length=settings.owner_password_length,
        reset_redirect_url=settings.client_login_url,
    )


def get_tenant_admin_service(
    tenant_repo: Annotated[ITenantRepository, Depends(get_tenant_repo_for_write)],
) -> TenantAdminService:
    return TenantAdminService(tenant_repo)
