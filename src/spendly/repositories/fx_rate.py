"""Exchange rate repository: append-only snapshots, newest-first lookups."""
from datetime import datetime

from sqlalchemy import select

from spendly.models.fx_rate import FxRate
from spendly.repositories.base import BaseRepository


class FxRateRepository(BaseRepository[FxRate]):
    """Repository for FxRate records. Records are only ever inserted."""

    model = FxRate

    async def get_latest(
        self, base_currency: str, target_currency: str, since: datetime
    ) -> FxRate | None:
        """Most recent record for the pair fetched at or after ``since``."""
        result = await self.db.execute(
            select(FxRate)
            .where(
                FxRate.base_currency == base_currency,
                FxRate.target_currency == target_currency,
                FxRate.fetched_at >= since,
            )
            .order_by(FxRate.fetched_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_latest_between(
        self, base_currency: str, target_currency: str, start: datetime, end: datetime
    ) -> FxRate | None:
        """Most recent record for the pair with start <= fetched_at <= end."""
        result = await self.db.execute(
            select(FxRate)
            .where(
                FxRate.base_currency == base_currency,
                FxRate.target_currency == target_currency,
                FxRate.fetched_at >= start,
                FxRate.fetched_at <= end,
            )
            .order_by(FxRate.fetched_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def add_rate(
        self, base_currency: str, target_currency: str, rate: float, fetched_at: datetime
    ) -> FxRate:
        """Insert a single immutable record."""
        return await self.create(
            FxRate(
                base_currency=base_currency,
                target_currency=target_currency,
                rate=rate,
                fetched_at=fetched_at,
            )
        )

    async def add_snapshot(
        self, base_currency: str, rates: dict[str, float], fetched_at: datetime
    ) -> int:
        """Insert one record per currency, all sharing ``fetched_at``.

        The pivot's own entry is skipped. Everything is committed in one
        transaction; on failure nothing is stored.
        """
        records = [
            FxRate(
                base_currency=base_currency,
                target_currency=code,
                rate=rate,
                fetched_at=fetched_at,
            )
            for code, rate in sorted(rates.items())
            if code != base_currency
        ]
        return await self.create_many(records)
