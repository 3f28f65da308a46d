"""
Database session and engine configuration.

This file sets up the async database connection using SQLAlchemy + asyncpg.
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from typing import AsyncGenerator

from app.core.config import settings


def _engine_connect_args(database_url: str) -> dict:
    """Driver-specific connect arguments."""
    if database_url.startswith("postgresql+asyncpg") and settings.DB_COMMAND_TIMEOUT_SECONDS:
        # Bounds every statement so a cancelled request cannot hang on the store
        return {"command_timeout": settings.DB_COMMAND_TIMEOUT_SECONDS}
    return {}


# Create the async database engine
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # When DEBUG=True, prints SQL queries to console
    future=True,
    pool_pre_ping=True,
    connect_args=_engine_connect_args(settings.DATABASE_URL),
)

# Create a session factory
# One session = one transaction per request; flows commit all or nothing
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,  # Keeps data accessible after commit
)

# Alias for dependencies
AsyncSessionLocal = async_session_maker


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session.

    Any exception raised while the request is handled rolls the whole
    transaction back, so multi-step flows never leave partial writes.

    Usage in a FastAPI endpoint:
        @app.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

