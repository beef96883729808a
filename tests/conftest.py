import os
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

# Must be set before spendly.config is imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("OPEN_EXCHANGE_RATES_APP_ID", "")
os.environ.setdefault("OPENAI_API_KEY", "")
os.environ.setdefault("SEED_CATEGORIES_ON_STARTUP", "false")

from spendly.api.deps import get_inference_provider, get_rate_resolver  # noqa: E402
from spendly.categorization.inference import InferenceResult  # noqa: E402
from spendly.categorization.taxonomy import DEFAULT_CATEGORIES  # noqa: E402
from spendly.core.exceptions import InferenceProviderError, RateProviderError  # noqa: E402
from spendly.core.security import create_access_token  # noqa: E402
from spendly.db.session import build_engine, build_session_factory, get_db  # noqa: E402
from spendly.fx.resolver import RateResolver  # noqa: E402
from spendly.main import app  # noqa: E402
from spendly.models.base import Base  # noqa: E402
from spendly.repositories.category import CategoryRepository  # noqa: E402

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock for TTL and freshness tests."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class StubRateProvider:
    """In-memory rate provider that counts fetches."""

    pivot = "USD"

    def __init__(self, rates: dict[str, float] | None = None):
        self.rates = rates if rates is not None else {"EUR": 0.9, "GBP": 0.8, "JPY": 150.0}
        self.error: RateProviderError | None = None
        self.calls = 0

    async def fetch_latest(self) -> dict[str, float]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return dict(self.rates)


class StubInferenceProvider:
    """Inference provider returning a canned answer and recording calls."""

    def __init__(self, category_name: str = "Food & Dining", confidence: float = 0.9):
        self.result = InferenceResult(category_name=category_name, confidence=confidence)
        self.error: InferenceProviderError | None = None
        self.calls: list[tuple] = []

    async def infer(self, merchant, notes, categories) -> InferenceResult:
        self.calls.append((merchant, notes, tuple(categories)))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
async def engine(tmp_path):
    """File-backed SQLite database, created fresh for each test."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'spendly-test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def db_session(session_factory):
    """Provide test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def categories(db_session: AsyncSession) -> dict:
    """Seed the default categories; returns them keyed by name."""
    repo = CategoryRepository(db_session)
    await repo.seed_defaults(DEFAULT_CATEGORIES)
    return {category.name: category for category in await repo.list_global()}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_provider() -> StubRateProvider:
    return StubRateProvider()


@pytest.fixture
def inference_provider() -> StubInferenceProvider:
    return StubInferenceProvider()


@pytest.fixture
def rate_resolver(session_factory, rate_provider, clock) -> RateResolver:
    return RateResolver(session_factory, rate_provider, clock=clock)


@pytest.fixture
def user_id():
    return uuid4()


@pytest.fixture
def auth_headers(user_id) -> dict:
    """Provide authentication headers with valid JWT token."""
    token = create_access_token(user_id=user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(db_session: AsyncSession, rate_resolver, inference_provider):
    """Provide test client with database and provider overrides."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_resolver] = lambda: rate_resolver
    app.dependency_overrides[get_inference_provider] = lambda: inference_provider

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
