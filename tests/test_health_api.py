import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.db.session import get_db
from app.main import app


@pytest.mark.db
def test_health_reports_database_and_schema(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["database"] == "ok"
    assert body["expectedRevision"] == "001_initial_schema"
    # Test schema is created from metadata, not migrations
    assert body["schemaRevision"] is None
    assert body["schemaUpToDate"] is False
    assert body["status"] == "degraded"


@pytest.mark.db
def test_health_unreachable_database_uses_error_envelope(client, tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'health.db'}",
        poolclass=NullPool,
    )
    broken_sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def broken_get_db():
        async with broken_sessions() as session:
            yield session

    app.dependency_overrides[get_db] = broken_get_db

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["error"] == {
        "code": "SERVICE_UNAVAILABLE",
        "message": "The service is temporarily unavailable.",
        "details": {"database": "unreachable"},
    }
