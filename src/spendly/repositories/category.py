"""Category directory lookups."""
from sqlalchemy import select

from spendly.models.category import Category
from spendly.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category with global-default helpers."""

    model = Category

    async def get_global_by_name(self, name: str) -> Category | None:
        """Exact (case-sensitive) name match among global categories."""
        result = await self.db.execute(
            select(Category)
            .where(Category.user_id.is_(None), Category.name == name)
            .order_by(Category.sort_order)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_global(self) -> list[Category]:
        """Active global categories in display order."""
        result = await self.db.execute(
            select(Category)
            .where(Category.user_id.is_(None), Category.is_active.is_(True))
            .order_by(Category.sort_order, Category.name)
        )
        return list(result.scalars().all())

    async def seed_defaults(self, defaults: list[dict]) -> int:
        """Insert any missing global default categories.

        Safe to run repeatedly; existing rows (matched by name) are left as is.

        Returns:
            Number of categories created
        """
        result = await self.db.execute(
            select(Category.name).where(Category.user_id.is_(None))
        )
        existing = set(result.scalars().all())

        return await self.create_many(
            [
                Category(user_id=None, is_default=True, **entry)
                for entry in defaults
                if entry["name"] not in existing
            ]
        )
