"""
Main FastAPI application.

This is the entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import settings
from app.core.logging import configure_logging
from app.db.session import engine
from app.errors import register_exception_handlers
from app.routers import auth, expenses, health, organizations, tasks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.

    - On startup: configure logging
    - On shutdown: dispose of the connection pool
    """
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting %s", settings.APP_NAME)

    yield

    logger.info("Shutting down %s", settings.APP_NAME)
    await engine.dispose()


# Create the FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Multi-tenant access control and data scoping API for ScaleUp Horizon",
    version="0.1.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Include routers (API endpoints)
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(organizations.router)
app.include_router(tasks.router)
app.include_router(expenses.router)
