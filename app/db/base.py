"""
SQLAlchemy declarative base.

Access-control tables (principal, organization, membership) inherit from
Base directly; organization-owned tables inherit from TenantScopedModel.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Registry and metadata shared by every model (and by Alembic)."""
