"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, adapters and application
services. Routes depend only on these, never on infrastructure directly.
"""

from tenantops.api.v1.dependencies.auth import (
    get_admin_auth_service,
    get_current_admin,
    get_request_id,
)
from tenantops.api.v1.dependencies.db import (
    get_admin_user_repo,
    get_db_session_factory,
    get_provisioning_store,
    get_setup_link_store,
    get_tenant_repo,
    get_tenant_repo_for_write,
)
from tenantops.api.v1.dependencies.external import (
    get_email_sender,
    get_http_client,
    get_identity_provider,
)
from tenantops.api.v1.dependencies.services import (
    get_credential_service,
    get_email_availability_service,
    get_provisioning_service,
    get_setup_link_service,
    get_tenant_admin_service,
)

__all__ = [
    "get_admin_auth_service",
    "get_admin_user_repo",
    "get_credential_service",
    "get_current_admin",
    "get_db_session_factory",
    "get_email_availability_service",
    "get_email_sender",
    "get_http_client",
    "get_identity_provider",
    "get_provisioning_service",
    "get_provisioning_store",
    "get_request_id",
    "get_setup_link_service",
    "get_setup_link_store",
    "get_tenant_admin_service",
    "get_tenant_repo",
    "get_tenant_repo_for_write",
]
