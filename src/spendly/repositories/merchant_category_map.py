"""Merchant mapping repository.

Writes are single ``INSERT ... ON CONFLICT DO UPDATE`` statements keyed on
(scope_key, merchant_key), so concurrent writers for the same merchant
never hit a duplicate-key error and override counts are incremented in SQL
rather than read-modify-written.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import joinedload

from spendly.models.merchant_category_map import MerchantCategoryMap, scope_key_for
from spendly.repositories.base import BaseRepository

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


@dataclass(frozen=True)
class MerchantMappingUpdate:
    """Fields an upsert sets on a mapping.

    ``confidence`` is only written when given. ``override_increment`` is
    added to the stored override count (and is the initial count for a new
    row).
    """

    category_id: UUID
    confidence: int | None = None
    override_increment: int = 0


class MerchantCategoryMapRepository(BaseRepository[MerchantCategoryMap]):
    """Repository for user-scoped and global merchant mappings."""

    model = MerchantCategoryMap

    async def get(self, user_id: UUID | None, merchant_key: str) -> MerchantCategoryMap | None:
        """Mapping for ``merchant_key`` in the user's scope (global when user_id is None).

        The category is loaded eagerly. Rows already in the session are
        refreshed, since upserts bypass the identity map.
        """
        result = await self.db.execute(
            select(MerchantCategoryMap)
            .options(joinedload(MerchantCategoryMap.category))
            .where(
                MerchantCategoryMap.scope_key == scope_key_for(user_id),
                MerchantCategoryMap.merchant_key == merchant_key,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        user_id: UUID | None,
        merchant_key: str,
        update: MerchantMappingUpdate,
        now: datetime | None = None,
    ) -> None:
        """Create or update the mapping for (scope, merchant_key) and commit."""
        now = now or datetime.now(timezone.utc)
        insert = self._insert_construct()

        stmt = insert(MerchantCategoryMap).values(
            id=uuid4(),
            scope_key=scope_key_for(user_id),
            user_id=user_id,
            merchant_key=merchant_key,
            category_id=update.category_id,
            confidence=update.confidence if update.confidence is not None else 0,
            override_count=update.override_increment,
            last_used_at=now,
            created_at=now,
            updated_at=now,
        )

        set_ = {
            "category_id": stmt.excluded.category_id,
            "last_used_at": stmt.excluded.last_used_at,
            "updated_at": stmt.excluded.updated_at,
        }
        if update.confidence is not None:
            set_["confidence"] = stmt.excluded.confidence
        if update.override_increment:
            set_["override_count"] = (
                MerchantCategoryMap.override_count + update.override_increment
            )

        stmt = stmt.on_conflict_do_update(
            index_elements=["scope_key", "merchant_key"],
            set_=set_,
        )
        await self.db.execute(stmt)
        await self.db.commit()

    def _insert_construct(self):
        dialect = self.db.get_bind().dialect.name
        try:
            return _UPSERT_INSERTS[dialect]
        except KeyError:
            raise NotImplementedError(
                f"Merchant mapping upserts are not supported on {dialect!r}"
            ) from None
