"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Schema is managed by Alembic migrations (see migrations/). Engine and
session factory are created lazily on first use so import does not
trigger Settings validation.

Request-scoped repositories use get_db / get_db_transactional. Stores that
need several short transactions per request (provisioning, setup links)
take the session factory from get_session_factory() instead.
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from tenantops.core.config import get_settings

logger = logging.getLogger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    pool_size = settings.db_pool_size if settings.db_pool_size is not None else 10
    max_overflow = (
        settings.db_max_overflow if settings.db_max_overflow is not None else 20
    )
    command_timeout = (
        settings.db_command_timeout
        if settings.db_command_timeout is not None
        else 30
    )
    connect_args: dict[str, Any] = {}
    if settings.database_url.startswith("postgresql+asyncpg"):
        connect_args["command_timeout"] = command_timeout
    engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_recycle=3600,
        connect_args=connect_args,
    )
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory (creating the engine if needed)."""
    _ensure_engine()
    assert AsyncSessionLocal is not None
    return AsyncSessionLocal


def get_engine() -> AsyncEngine:
    _ensure_engine()
    assert engine is not None
    return engine


async def dispose_engine() -> None:
    """Close pooled connections and forget the engine (shutdown and tests)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None


async def get_db() -> AsyncIterator[AsyncSession]:
    """Database session dependency for read operations.

    Does not commit; use get_db_transactional for writes.
    """
    factory = get_session_factory()
    async with factory() as session:
        yield session


async def get_db_transactional() -> AsyncIterator[AsyncSession]:
    """Database session dependency for write operations.

    Begins a transaction, commits on success, rolls back on exception.
    Use for POST, PUT, PATCH, DELETE endpoints.
    """
    factory = get_session_factory()
    async with factory() as session:
        async with session.begin():
            yield session
