"""Currency rate resolution.

Rates are resolved through memory cache, stored snapshots, the external
provider and finally a static table, so callers always get a number.
"""

from .cache import RateCache, RateCacheEntry
from .providers import OpenExchangeRatesProvider, RateProvider, build_rate_provider
from .resolver import Conversion, RateResolver

__all__ = [
    "Conversion",
    "OpenExchangeRatesProvider",
    "RateCache",
    "RateCacheEntry",
    "RateProvider",
    "RateResolver",
    "build_rate_provider",
]
