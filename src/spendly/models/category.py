"""Expense categories (the category directory).

Rows with ``user_id`` NULL are the global defaults every user sees; the
categorization engine only ever suggests global categories.
"""

from uuid import UUID

from sqlalchemy import Boolean, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from spendly.models.base import BaseModel


class Category(BaseModel):
    """A spending category."""

    __tablename__ = "categories"

    user_id: Mapped[UUID | None] = mapped_column(nullable=True, default=None)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    icon: Mapped[str] = mapped_column(String(50), nullable=False, default="tag")
    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#6366f1")
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_categories_user_id_is_active", "user_id", "is_active"),
        Index("ix_categories_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name}, user_id={self.user_id})>"
