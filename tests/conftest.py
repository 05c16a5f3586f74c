"""Shared pytest fixtures for all test suites."""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from tests.helpers import TEST_PASSWORD, ReferenceData, register
from tripplanner.config import Settings
from tripplanner.db.engine import (
    create_async_engine_from_settings,
    create_session_factory,
    normalize_database_url,
)
from tripplanner.db.models import Activity, Base, User
from tripplanner.db.seed import seed_activities, seed_cities
from tripplanner.main import create_app
from tripplanner.security import create_access_token, hash_password


@pytest.fixture
def settings() -> Settings:
    """Settings for an in-memory database and fast password hashing."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret="test-secret",
        password_hash_iterations=1_000,
        auth_attempts_per_min=1_000,
        redis_url=None,
        auto_create_schema=False,
    )


@pytest_asyncio.fixture
async def engine(settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the full schema."""
    engine = create_async_engine_from_settings(settings)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(
    settings: Settings,
    engine: AsyncEngine,
    session_factory: async_sessionmaker[AsyncSession],
) -> FastAPI:
    """Application wired to the test engine.

    ASGITransport does not run the lifespan, so the engine is attached here.
    """
    app = create_app(settings)
    app.state.engine = engine
    app.state.session_factory = session_factory
    return app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def reference_data(session_factory: async_sessionmaker[AsyncSession]) -> ReferenceData:
    """Seed cities and activities."""
    async with session_factory() as session:
        cities = await seed_cities(session)
        await seed_activities(session, cities)
        await session.commit()

        activities = (await session.execute(select(Activity))).scalars().all()
        return ReferenceData(
            cities={name: city.id for name, city in cities.items()},
            activities={activity.name: activity.id for activity in activities},
            activity_costs={activity.name: activity.cost for activity in activities},
        )


@pytest_asyncio.fixture
async def user_token(client: AsyncClient) -> str:
    return await register(client, "alice@example.com", "Alice")


@pytest_asyncio.fixture
async def other_token(client: AsyncClient) -> str:
    return await register(client, "bob@example.com", "Bob")


@pytest_asyncio.fixture
async def admin_token(
    settings: Settings, session_factory: async_sessionmaker[AsyncSession]
) -> str:
    """Create an admin directly in the database and sign a token for it."""
    async with session_factory() as session:
        admin = User(
            email="admin@example.com",
            password_hash=hash_password(TEST_PASSWORD, settings.password_hash_iterations),
            first_name="Ada",
            last_name="Admin",
            is_admin=True,
        )
        session.add(admin)
        await session.commit()
        return create_access_token(admin.id, admin.email, True, settings)


@pytest_asyncio.fixture
async def postgres_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine for PostgreSQL integration tests.

    Requires POSTGRES_TEST_URL to point at a disposable PostgreSQL database.
    Tests using this fixture should be marked with @pytest.mark.postgres.
    """
    database_url = os.getenv("POSTGRES_TEST_URL")
    if not database_url:
        pytest.skip("POSTGRES_TEST_URL not set - skipping postgres test")

    engine = create_async_engine(normalize_database_url(database_url), poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup: drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def postgres_session(postgres_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSession(postgres_engine, expire_on_commit=False) as session:
        yield session
        await session.rollback()
