"""Shared repository plumbing."""
from collections.abc import Sequence
from typing import ClassVar, Generic, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from spendly.models.base import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """Session-bound access to one model.

    Subclasses set ``model``. Write helpers commit, so each call is its own
    transaction.
    """

    model: ClassVar[type[BaseModel]]

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, id: UUID) -> T | None:
        return await self.db.get(self.model, id)

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()

    async def create(self, obj: T) -> T:
        """Insert one row and return it refreshed."""
        self.db.add(obj)
        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    async def create_many(self, objs: Sequence[T]) -> int:
        """Insert all rows in one transaction; nothing is stored on failure."""
        if not objs:
            return 0
        self.db.add_all(objs)
        await self.db.commit()
        return len(objs)
