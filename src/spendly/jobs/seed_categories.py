"""
Seed the global default categories.

    python -m spendly.jobs.seed_categories
"""

import asyncio
import logging

from spendly.categorization.taxonomy import DEFAULT_CATEGORIES
from spendly.config import settings
from spendly.core.log import setup_logging
from spendly.db.session import AsyncSessionLocal, async_engine
from spendly.repositories.category import CategoryRepository

logger = logging.getLogger(__name__)


async def run() -> int:
    try:
        async with AsyncSessionLocal() as session:
            return await CategoryRepository(session).seed_defaults(DEFAULT_CATEGORIES)
    finally:
        await async_engine.dispose()


def main():
    """CLI entry point."""
    setup_logging(settings.log_level)
    created = asyncio.run(run())
    logger.info(f"Default categories seeded: {created} created")


if __name__ == "__main__":
    main()
