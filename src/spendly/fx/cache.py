"""Process-local exchange rate cache."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class RateCacheEntry:
    rate: float
    cached_at: datetime


class RateCache:
    """TTL map of (base, target) -> rate.

    Expired entries are not evicted; lookups ignore them and the next
    ``put`` for the pair overwrites them.
    """

    def __init__(self, ttl: timedelta):
        self.ttl = ttl
        self._entries: dict[tuple[str, str], RateCacheEntry] = {}

    def get(self, base: str, target: str, now: datetime) -> float | None:
        entry = self._entries.get((base, target))
        if entry is None or now - entry.cached_at >= self.ttl:
            return None
        return entry.rate

    def put(self, base: str, target: str, rate: float, now: datetime) -> None:
        self._entries[(base, target)] = RateCacheEntry(rate=rate, cached_at=now)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, pair: tuple[str, str]) -> bool:
        return pair in self._entries
