"""Learned merchant -> category mappings.

A mapping is either user-scoped or global. ``scope_key`` holds the user id
as text, or ``"global"``, so the unique key also covers global rows (NULL
user ids never collide in a SQL unique constraint). Mappings accumulate and
are never deleted.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spendly.models.base import BaseModel
from spendly.models.category import Category

GLOBAL_SCOPE = "global"


def scope_key_for(user_id: UUID | None) -> str:
    return str(user_id) if user_id is not None else GLOBAL_SCOPE


class MerchantCategoryMap(BaseModel):
    """Category mapping for a normalized merchant name within one scope."""

    __tablename__ = "merchant_category_maps"

    scope_key: Mapped[str] = mapped_column(String(36), nullable=False)
    user_id: Mapped[UUID | None] = mapped_column(nullable=True, default=None)
    merchant_key: Mapped[str] = mapped_column(String(255), nullable=False)
    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
    )
    confidence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    override_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_used_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("scope_key", "merchant_key", name="uq_merchant_map_scope_key"),
    )

    category: Mapped[Category] = relationship(Category, lazy="raise")

    @property
    def is_global(self) -> bool:
        return self.scope_key == GLOBAL_SCOPE

    def __repr__(self) -> str:
        return (
            f"<MerchantCategoryMap(scope={self.scope_key}, merchant_key={self.merchant_key}, "
            f"category_id={self.category_id}, confidence={self.confidence}, "
            f"override_count={self.override_count})>"
        )
