"""Base repository: generic get/create/update on a request-scoped session."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenantops.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_entity_by_id, create and update.

    Methods flush but never commit; the transaction belongs to the caller
    (get_db_transactional for write endpoints).
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_entity_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single ORM record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and refresh server defaults."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush pending changes on an attached record and refresh it."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj
