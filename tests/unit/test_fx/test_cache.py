"""Tests for the in-memory rate cache."""

from datetime import datetime, timedelta, timezone

from spendly.fx.cache import RateCache

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestRateCache:
    def test_miss_on_empty_cache(self):
        cache = RateCache(timedelta(minutes=90))
        assert cache.get("EUR", "USD", NOW) is None

    def test_hit_within_ttl(self):
        cache = RateCache(timedelta(minutes=90))
        cache.put("EUR", "USD", 1.08, NOW)

        assert cache.get("EUR", "USD", NOW + timedelta(minutes=89)) == 1.08

    def test_entry_expires_at_ttl(self):
        cache = RateCache(timedelta(minutes=90))
        cache.put("EUR", "USD", 1.08, NOW)

        assert cache.get("EUR", "USD", NOW + timedelta(minutes=90)) is None

    def test_pairs_are_directional(self):
        cache = RateCache(timedelta(minutes=90))
        cache.put("EUR", "USD", 1.08, NOW)

        assert cache.get("USD", "EUR", NOW) is None
        assert ("EUR", "USD") in cache
        assert ("USD", "EUR") not in cache

    def test_put_overwrites_expired_entry(self):
        cache = RateCache(timedelta(minutes=90))
        cache.put("EUR", "USD", 1.08, NOW)
        later = NOW + timedelta(hours=3)
        cache.put("EUR", "USD", 1.10, later)

        assert cache.get("EUR", "USD", later) == 1.10
        assert len(cache) == 1

    def test_clear(self):
        cache = RateCache(timedelta(minutes=90))
        cache.put("EUR", "USD", 1.08, NOW)
        cache.put("GBP", "USD", 1.27, NOW)

        cache.clear()

        assert len(cache) == 0
        assert cache.get("EUR", "USD", NOW) is None
