"""
Pytest configuration and shared fixtures.

Every test gets its own SQLite database file (aiosqlite driver) with the
schema created from the ORM metadata. The API client overrides get_db so
requests run against that database.
"""

import os

# Settings are read once at import time; point them at test values first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./.pytest-bootstrap.db"
os.environ["SECRET_KEY"] = "test-secret-key-for-session-tokens"
os.environ["BCRYPT_ROUNDS"] = "10"
os.environ["FRONTEND_URL"] = "http://frontend.test"

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app import models  # noqa: F401  (registers all tables on Base.metadata)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: uses a per-test SQLite database")


@pytest.fixture
def db_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )

    async def create_schema():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_schema())
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

