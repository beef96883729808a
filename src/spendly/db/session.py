"""Async engine and session factory."""

from collections.abc import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from spendly.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Engine for ``database_url``.

    Pooled server databases get pre-ping; SQLite gets foreign key
    enforcement, which it leaves off per connection by default.
    """
    options: dict = {"echo": echo}
    if not database_url.startswith("sqlite"):
        options["pool_pre_ping"] = True
    engine = create_async_engine(database_url, **options)
    if database_url.startswith("sqlite"):
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Rows are read back after commit (snapshot inserts, mapping upserts).
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# Merchant names and notes are user input, so SQL echo is honoured in
# development only.
async_engine = build_engine(
    settings.database_url,
    echo=settings.db_echo and settings.app_env.lower() == "development",
)
AsyncSessionLocal = build_session_factory(async_engine)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Request-scoped session dependency."""
    async with AsyncSessionLocal() as session:
        yield session
