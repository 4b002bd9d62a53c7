"""DB session and repository dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tenantops.infrastructure.persistence.database import (
    get_db,
    get_db_transactional,
    get_session_factory,
)
from tenantops.infrastructure.persistence.repositories import (
    AdminUserRepository,
    ProvisioningStore,
    SetupLinkStore,
    TenantRepository,
)


def get_db_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory for stores that run their own short transactions."""
    return get_session_factory()


async def get_tenant_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TenantRepository:
    """Tenant repository on a read session."""
    return TenantRepository(db)


async def get_tenant_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> TenantRepository:
    """Tenant repository inside the request transaction (commit on success)."""
    return TenantRepository(db)


async def get_admin_user_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AdminUserRepository:
    return AdminUserRepository(db)


def get_provisioning_store(
    factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_db_session_factory)],
) -> ProvisioningStore:
    return ProvisioningStore(factory)


def get_setup_link_store(
    factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_db_session_factory)],
) -> SetupLinkStore:
    return SetupLinkStore(factory)
