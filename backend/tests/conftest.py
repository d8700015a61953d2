"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator, Generator

# Must be set before any app imports that trigger Settings/engine creation
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"

import httpx  # noqa: E402
import pytest  # noqa: E402
import respx  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.cache import TTLCache  # noqa: E402
from core.config import Settings  # noqa: E402
from models.base import Base  # noqa: E402
from services.insight_service import HuggingFaceChatProvider, InsightService  # noqa: E402
from services.news_service import NewsService  # noqa: E402
from services.price_service import PriceService  # noqa: E402

TEST_JWT_SECRET = "test-secret"
COINGECKO_URL = "https://api.coingecko.com/api/v3"
CRYPTOPANIC_URL = "https://cryptopanic.com/api/developer/v2"
HF_ROUTER_URL = "https://router.huggingface.co/v1/chat/completions"


class FakeClock:
    """Controllable monotonic clock for cache freshness tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_settings(**overrides: object) -> Settings:
    """Settings for tests, isolated from any local .env file."""
    values: dict[str, object] = {
        "database_url": "sqlite+aiosqlite:///:memory:",
        "jwt_secret": TEST_JWT_SECRET,
        "cryptopanic_key": "cp-test-key",
        "hf_token": "hf-test-token",
        "static_dir": "/nonexistent-static-dir",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def test_settings() -> Settings:
    """Default test settings (all secrets configured)."""
    return make_settings()


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Create a fresh in-memory SQLite engine with all tables for each test.

    StaticPool keeps a single connection so every session sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create an async session bound to the test database."""
    session_factory = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock shared by the gateway caches."""
    return FakeClock()


@pytest.fixture
def upstream() -> Generator[respx.MockRouter]:
    """Mock all outbound HTTP; unmatched requests fail the test."""
    with respx.mock(assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
async def http_client() -> AsyncGenerator[httpx.AsyncClient]:
    """Outbound HTTP client used by the gateways."""
    async with httpx.AsyncClient(timeout=5.0) as client:
        yield client


@pytest.fixture
def price_service(http_client: httpx.AsyncClient, clock: FakeClock) -> PriceService:
    """PriceService with a 120s cache driven by the fake clock."""
    return PriceService(http_client, TTLCache(120, clock=clock), base_url=COINGECKO_URL)


@pytest.fixture
def news_service(http_client: httpx.AsyncClient, clock: FakeClock) -> NewsService:
    """NewsService with a 300s cache driven by the fake clock."""
    return NewsService(
        http_client,
        TTLCache(300, clock=clock),
        base_url=CRYPTOPANIC_URL,
        api_key="cp-test-key",
    )


@pytest.fixture
def insight_service(http_client: httpx.AsyncClient, test_settings: Settings) -> InsightService:
    """InsightService over the configured Hugging Face models."""
    return InsightService([
        HuggingFaceChatProvider(
            http_client, url=HF_ROUTER_URL, token="hf-test-token", model=model,
        )
        for model in test_settings.insight_models
    ])


@pytest.fixture
async def client(
    db_session: AsyncSession,
    test_settings: Settings,
    price_service: PriceService,
    news_service: NewsService,
    insight_service: InsightService,
) -> AsyncGenerator[AsyncClient]:
    """
    Create a test client with database session and settings overrides.

    ASGITransport does not run the lifespan, so gateways are attached to
    app.state here.
    """
    from api.main import app  # noqa: PLC0415
    from core.config import get_settings  # noqa: PLC0415
    from db.session import get_async_session  # noqa: PLC0415

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        # Commit per request like the real dependency, so a rollback in one
        # request cannot undo rows written by an earlier one
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_settings] = lambda: test_settings

    app.state.price_service = price_service
    app.state.news_service = news_service
    app.state.insight_service = insight_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
