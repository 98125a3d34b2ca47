from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from aqar.config import settings
from aqar.database import Base, get_db
from aqar.main import app
from aqar.models.property import OfferType, Property, PropertyStatus, PropertyType
from aqar.models.user import User

BASE_TIME = datetime(2025, 1, 1, 12, 0, 0)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point image storage at an empty per-test directory."""
    directory = tmp_path / "uploads"
    directory.mkdir()
    monkeypatch.setattr(settings, "upload_dir", str(directory))
    monkeypatch.setattr(settings, "media_base_url", "/media")
    return directory


@pytest_asyncio.fixture
async def session_factory(tmp_path: Path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_user(db: AsyncSession) -> Callable[..., Awaitable[User]]:
    async def _make(name: str = "Fatima", email: str | None = None) -> User:
        user = User(name=name, email=email or f"{name.lower()}@example.com")
        db.add(user)
        await db.commit()
        return user

    return _make


@pytest.fixture
def make_property(db: AsyncSession) -> Callable[..., Awaitable[Property]]:
    """Insert a listing created ``minute`` minutes after BASE_TIME (defaults to insertion order)."""
    counter = {"n": 0}

    async def _make(owner: User, **overrides) -> Property:
        counter["n"] += 1
        minute = overrides.pop("minute", counter["n"])
        values = {
            "title": f"Listing {counter['n']}",
            "description": "",
            "price": 100_000,
            "offer_type": OfferType.SALE,
            "property_type": PropertyType.APARTMENT,
            "city": "Manama",
            "area": "Juffair",
            "address": "King Faisal Highway",
            "features": {"bedrooms": 2, "bathrooms": 1, "area": 110},
            "images": [],
            "contact_info": {"phone": "+973 0000 0000", "email": "owner@example.com"},
            "owner_id": owner.id,
            "status": PropertyStatus.APPROVED,
            "featured": False,
            "views": 0,
            "created_at": BASE_TIME + timedelta(minutes=minute),
        }
        values.update(overrides)
        prop = Property(**values)
        db.add(prop)
        await db.commit()
        return prop

    return _make


@pytest_asyncio.fixture
async def owner(make_user) -> User:
    return await make_user("Owner", "owner@example.com")
