# portal/models/role.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field


class Role(SQLModel):
    """
    Row of public.roles.

    organization_id = None marks a system-wide role.
    """

    id: uuid.UUID
    name: str
    organization_id: uuid.UUID | None = None
    is_system_role: bool = False
    permissions: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
