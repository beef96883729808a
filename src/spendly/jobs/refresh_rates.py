"""
Bulk exchange rate refresh.

Run from cron (hourly is plenty) or by hand:

    python -m spendly.jobs.refresh_rates
"""

import argparse
import asyncio
import logging
import sys

from spendly.config import settings
from spendly.core.log import setup_logging
from spendly.db.session import AsyncSessionLocal, async_engine
from spendly.fx.providers import build_rate_provider
from spendly.fx.resolver import RateResolver

logger = logging.getLogger(__name__)


async def run() -> int:
    """Fetch and store one snapshot. Returns the number of rates stored."""
    resolver = RateResolver.from_settings(
        settings, AsyncSessionLocal, build_rate_provider(settings)
    )
    try:
        return await resolver.refresh_all_rates()
    finally:
        await async_engine.dispose()


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Refresh stored exchange rates")
    parser.add_argument("--log-level", default=settings.log_level, help="Log level (default: %(default)s)")
    args = parser.parse_args()

    setup_logging(args.log_level, json_logs=settings.log_format.lower() == "json")
    stored = asyncio.run(run())
    sys.exit(0 if stored else 1)


if __name__ == "__main__":
    main()
