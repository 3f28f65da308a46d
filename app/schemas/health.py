"""
Health check schemas.
"""

from typing import Optional

from app.schemas.base import CamelModel


class HealthRead(CamelModel):
    status: str
    database: str
    schema_revision: Optional[str] = None
    expected_revision: Optional[str] = None
    schema_up_to_date: bool = False
