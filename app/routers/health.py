"""
Health check router.

Reports whether the store is reachable and whether its schema revision
matches the newest Alembic migration shipped with the code.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from alembic.config import Config
from alembic.script import ScriptDirectory
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.errors import ServiceUnavailableError
from app.schemas.health import HealthRead

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

PROJECT_ROOT = Path(__file__).resolve().parents[2]


@lru_cache(maxsize=1)
def expected_revision() -> Optional[str]:
    """Head revision of the bundled migrations; None when they are not shipped."""
    ini_path = PROJECT_ROOT / "alembic.ini"
    if not ini_path.exists():
        return None
    config = Config(str(ini_path))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return ScriptDirectory.from_config(config).get_current_head()


async def _schema_revision(db: AsyncSession) -> Optional[str]:
    try:
        result = await db.execute(text("SELECT version_num FROM alembic_version"))
    except SQLAlchemyError:
        # Schema built from metadata (tests, scratch databases) has no version table
        await db.rollback()
        return None
    return result.scalar_one_or_none()


@router.get("/health", response_model=HealthRead)
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Liveness plus schema check.

    Raises:
        ServiceUnavailableError: The store cannot be reached (503)
    """
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Health check could not reach the database", exc_info=True)
        raise ServiceUnavailableError(details={"database": "unreachable"})

    current = await _schema_revision(db)
    expected = expected_revision()
    up_to_date = current is not None and current == expected
    if current is not None and not up_to_date:
        logger.warning("Schema revision %s does not match migration head %s", current, expected)

    return HealthRead(
        status="ok" if up_to_date else "degraded",
        database="ok",
        schema_revision=current,
        expected_revision=expected,
        schema_up_to_date=up_to_date,
    )
