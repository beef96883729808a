"""Exchange rate snapshots.

Rows are immutable: a newer snapshot for the same pair supersedes an older
one by ``fetched_at``, nothing is ever updated in place. Identity pairs
(USD->USD) are never stored.
"""

from datetime import datetime

from sqlalchemy import DateTime, Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from spendly.models.base import BaseModel, utcnow


class FxRate(BaseModel):
    """A conversion rate such that amount_in_target = amount_in_base * rate."""

    __tablename__ = "fx_rates"

    base_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    target_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    rate: Mapped[float] = mapped_column(Float, nullable=False)
    fetched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (
        Index("ix_fx_rates_pair_fetched_at", "base_currency", "target_currency", "fetched_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<FxRate({self.base_currency}->{self.target_currency}, "
            f"rate={self.rate}, fetched_at={self.fetched_at})>"
        )
