"""Exchange rate resolution.

``RateResolver.resolve_rate`` walks four tiers and always returns a number:

1. process-local cache (entries younger than the TTL, 90 minutes by default)
2. the ``fx_rates`` table (most recent record fetched within 24 hours)
3. the external provider (one bulk pivot-relative snapshot; the derived
   cross rate is persisted and cached)
4. the static approximate table (cached, never persisted)

Provider and database failures are logged and move resolution to the next
tier. The resolver is meant to live for the whole process; it opens a
short-lived session for each store interaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spendly.config import Settings
from spendly.core.currencies import normalize_currency, static_rate
from spendly.core.exceptions import RateProviderError
from spendly.fx.cache import RateCache
from spendly.fx.providers import RateProvider
from spendly.repositories.fx_rate import FxRateRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

DEFAULT_CACHE_TTL = timedelta(minutes=90)
DEFAULT_STORE_FRESHNESS = timedelta(hours=24)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_day_bounds(day: date) -> tuple[datetime, datetime]:
    """First and last instant of ``day`` in server-local time, as UTC datetimes."""
    start = datetime.combine(day, time.min).astimezone(timezone.utc)
    end = datetime.combine(day, time.max).astimezone(timezone.utc)
    return start, end


def cross_rate(base_rate: float, target_rate: float) -> float:
    """Rate base -> target from two pivot -> currency rates."""
    return (1 / base_rate) * target_rate


@dataclass(frozen=True)
class Conversion:
    base: str
    target: str
    amount: float
    rate: float
    converted: float


class RateResolver:
    """Tiered exchange rate lookup with an owned in-memory cache."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        provider: RateProvider | None = None,
        *,
        cache_ttl: timedelta = DEFAULT_CACHE_TTL,
        store_freshness: timedelta = DEFAULT_STORE_FRESHNESS,
        clock: Clock = utc_now,
    ):
        self._session_factory = session_factory
        self.provider = provider
        self.cache = RateCache(cache_ttl)
        self.store_freshness = store_freshness
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession],
        provider: RateProvider | None = None,
    ) -> "RateResolver":
        return cls(
            session_factory,
            provider,
            cache_ttl=timedelta(minutes=settings.fx_cache_ttl_minutes),
            store_freshness=timedelta(hours=settings.fx_store_freshness_hours),
        )

    async def resolve_rate(self, base: str, target: str) -> float:
        """Best available rate such that amount_in_target = amount_in_base * rate."""
        base, target = normalize_currency(base), normalize_currency(target)
        if base == target:
            return 1.0

        now = self._clock()
        log_extra = {"base": base, "target": target}

        cached = self.cache.get(base, target, now)
        if cached is not None:
            logger.debug("FX rate served from memory cache", extra={**log_extra, "tier": "memory"})
            return cached

        stored = await self._lookup_store(base, target, now)
        if stored is not None:
            logger.debug("FX rate served from store", extra={**log_extra, "tier": "store"})
            self.cache.put(base, target, stored, now)
            return stored

        if self.provider is not None:
            try:
                rates = await self.provider.fetch_latest()
                rate = self._provider_cross_rate(rates, base, target)
            except RateProviderError as exc:
                logger.warning(
                    f"FX provider unavailable, using static rates: {exc.reason}",
                    extra={**log_extra, "error_code": exc.error_code},
                )
            else:
                await self._persist(base, target, rate, now)
                self.cache.put(base, target, rate, now)
                logger.debug("FX rate fetched from provider", extra={**log_extra, "tier": "provider"})
                return rate

        rate = cross_rate(static_rate(base), static_rate(target))
        self.cache.put(base, target, rate, now)
        logger.debug("FX rate derived from static table", extra={**log_extra, "tier": "static"})
        return rate

    async def resolve_historical_rate(self, base: str, target: str, on: date) -> float | None:
        """Stored rate for the pair on the local calendar day ``on``.

        Returns None when nothing was stored that day; callers fall back to
        ``resolve_rate``. Never calls the provider or the static table.
        """
        base, target = normalize_currency(base), normalize_currency(target)
        if base == target:
            return 1.0

        start, end = local_day_bounds(on)
        try:
            async with self._session_factory() as session:
                record = await FxRateRepository(session).get_latest_between(
                    base, target, start, end
                )
        except SQLAlchemyError:
            logger.warning(
                "Historical FX lookup failed",
                extra={"base": base, "target": target},
                exc_info=True,
            )
            return None
        return record.rate if record else None

    async def refresh_all_rates(self) -> int:
        """Store a fresh pivot snapshot and drop every cached rate.

        Returns the number of records stored. Failures are logged and leave
        stored records (and the cache) untouched; this never raises.
        """
        if self.provider is None:
            logger.info("FX refresh skipped: no rate provider configured")
            return 0

        try:
            rates = await self.provider.fetch_latest()
        except RateProviderError as exc:
            logger.error(
                f"FX refresh failed: {exc.reason}", extra={"error_code": exc.error_code}
            )
            return 0

        fetched_at = self._clock()
        try:
            async with self._session_factory() as session:
                stored = await FxRateRepository(session).add_snapshot(
                    self.provider.pivot, rates, fetched_at
                )
        except SQLAlchemyError:
            logger.error(
                "FX refresh could not be persisted", extra={"error_code": "FX_002"}, exc_info=True
            )
            return 0

        self.cache.clear()
        logger.info(f"FX rates updated: {stored} currencies")
        return stored

    async def convert(self, amount: float, base: str, target: str) -> Conversion:
        """Convert ``amount`` with the live rate, rounded to 2 decimal places."""
        rate = await self.resolve_rate(base, target)
        return Conversion(
            base=normalize_currency(base),
            target=normalize_currency(target),
            amount=amount,
            rate=rate,
            converted=round(amount * rate, 2),
        )

    async def _lookup_store(self, base: str, target: str, now: datetime) -> float | None:
        try:
            async with self._session_factory() as session:
                record = await FxRateRepository(session).get_latest(
                    base, target, since=now - self.store_freshness
                )
        except SQLAlchemyError:
            logger.warning(
                "FX store lookup failed", extra={"base": base, "target": target}, exc_info=True
            )
            return None
        return record.rate if record else None

    async def _persist(self, base: str, target: str, rate: float, now: datetime) -> None:
        try:
            async with self._session_factory() as session:
                await FxRateRepository(session).add_rate(base, target, rate, now)
        except SQLAlchemyError:
            # The rate is still served; only reuse across processes is lost.
            logger.warning(
                "Could not persist fetched FX rate",
                extra={"base": base, "target": target, "error_code": "FX_002"},
                exc_info=True,
            )

    def _provider_cross_rate(self, rates: dict[str, float], base: str, target: str) -> float:
        pivot = self.provider.pivot
        missing = [code for code in (base, target) if code != pivot and code not in rates]
        if missing:
            raise RateProviderError("missing_currency", currencies=missing)
        # Only the pivot may be absent from the snapshot; it is 1 by definition.
        return cross_rate(rates.get(base, 1.0), rates.get(target, 1.0))
