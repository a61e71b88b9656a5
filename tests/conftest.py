"""
Pytest configuration and fixtures for testing.
"""
import os

# Settings require DATABASE_URL at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from app.main import app
from app.db.session import Base, get_session
from app.db.models.event import Event
from app.db.repositories import create_event


# Test database URL - use environment variable to run against PostgreSQL
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create an engine with a fresh schema for each test."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        # One shared in-memory connection so every session sees the same tables
        engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    else:
        engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with TestSessionLocal() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing API endpoints.
    Overrides the database session dependency.
    """
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def event_payload() -> dict:
    """A complete, valid event as a client would submit it."""
    return {
        "title": "My Talk",
        "description": "A deep dive into async Python services",
        "overview": "Talks, demos and Q&A",
        "image": "https://res.cloudinary.com/demo/image/upload/event.png",
        "venue": "Innovation Hub",
        "location": "Nairobi, Kenya",
        "date": "2025-11-07",
        "time": "9:00 AM - 6:00 PM",
        "mode": "hybrid",
        "audience": "Backend developers",
        "agenda": ["Registration", "Keynote", "Workshops"],
        "organizer": "Nairobi Python Community",
        "tags": ["python", "async"],
    }


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, event_payload: dict) -> Event:
    """Create a test event through the repository (slug ``my-talk``)."""
    return await create_event(db_session, dict(event_payload))


@pytest_asyncio.fixture
async def test_events(db_session: AsyncSession, event_payload: dict) -> list:
    """Create multiple test events with distinct titles."""
    events = []
    for i in range(5):
        data = dict(event_payload, title=f"Event {i + 1}")
        events.append(await create_event(db_session, data))
    return events
