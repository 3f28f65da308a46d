"""
Base Pydantic schemas with common fields.

API payloads use camelCase on the wire; Python code uses snake_case.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, accepts either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TenantScopedRead(CamelModel):
    """
    Base schema for reading tenant-scoped data.

    Includes all the auto-generated fields like id and timestamps.
    """

    id: UUID
    organization_id: UUID
    created_at: datetime
    updated_at: datetime
