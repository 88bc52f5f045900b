"""
Shared fixtures: a fresh in-memory SQLite database per test and an HTTP client
wired to it. DATABASE_URL is set before the app modules are imported so the
module-level engine never touches ./data.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from training_tracker.db.base import Base
from training_tracker.db.session import build_engine, get_db
from training_tracker.main import app
from training_tracker.models import User

from factories import OTHER_USER_ID, OWNER_ID


@pytest_asyncio.fixture
async def session_maker():
    engine = build_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        session.add_all([User(id=OWNER_ID, name="owner"), User(id=OTHER_USER_ID, name="other")])
        await session.flush()
        yield session


@pytest_asyncio.fixture
async def client(session_maker):
    async with session_maker() as session:
        session.add_all([User(id=OWNER_ID, name="owner"), User(id=OTHER_USER_ID, name="other")])
        await session.commit()

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def owner_headers():
    return {"X-User-Id": str(OWNER_ID)}
