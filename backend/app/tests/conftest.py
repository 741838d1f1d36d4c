from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timezone

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.deps import get_clock_factory, get_db
from app.core.config import Settings, get_settings
from app.db.base import Base
from app.main import app
from app.models.enums import TradeDirection, TradeResult
from app.services.normalization import JournalTrade

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

# Wednesday, 2024-07-17 15:30 UTC.
FIXED_NOW = datetime(2024, 7, 17, 15, 30, tzinfo=timezone.utc)


@pytest.fixture()
def make_trade() -> Callable[..., JournalTrade]:
    def _make(
        date: datetime | str = "2024-07-15T10:00:00+00:00",
        pnl: float | None = 0.0,
        result: TradeResult | str = TradeResult.BREAKEVEN,
        direction: TradeDirection | str = TradeDirection.BUY,
        asset: str = "EUR/USD",
        **kwargs,
    ) -> JournalTrade:
        if isinstance(date, str):
            date = datetime.fromisoformat(date)
        if date.tzinfo is None:
            date = date.replace(tzinfo=timezone.utc)
        return JournalTrade(date=date, asset=asset, direction=direction, result=result, pnl=pnl, **kwargs)

    return _make


@pytest_asyncio.fixture()
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(TEST_DB_URL, future=True, poolclass=StaticPool)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture()
async def async_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(database_url=TEST_DB_URL, default_timezone="UTC")


@pytest_asyncio.fixture()
async def client(session_factory, test_settings) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    def fixed_clock_factory():
        return lambda tz: (lambda: FIXED_NOW.astimezone(tz) if tz is not None else FIXED_NOW)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_clock_factory] = fixed_clock_factory
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()
