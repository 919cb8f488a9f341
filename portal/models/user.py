# portal/models/user.py
import logging
import uuid
from datetime import datetime
from enum import Enum

from pydantic import model_validator
from sqlmodel import SQLModel, Field

logger = logging.getLogger(__name__)


class UserRole(str, Enum):
    """Application role stored on the profile row (not a Supabase RLS role)."""

    USER = "user"
    ORG_ADMIN = "org_admin"
    SUPER_ADMIN = "super_admin"


class UserProfile(SQLModel):
    """
    Row of public.users, the portal's view of an operator.

    Identity:
      - id: MUST match Supabase auth.users.id (JWT "sub")

    Organization membership:
      - super_admin may have no organization
      - every other role should carry organization_id; rows that don't are
        still accepted on read (logged), but the portal refuses to create
        them (see schemas.user)
    """

    id: uuid.UUID = Field(description="Matches Supabase auth.users.id")
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: UserRole = UserRole.USER
    organization_id: uuid.UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="after")
    def warn_missing_organization(self) -> "UserProfile":
        if self.role != UserRole.SUPER_ADMIN and self.organization_id is None:
            logger.warning(
                "Profile %s has role %s but no organization", self.id, self.role.value
            )
        return self

    @property
    def display_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        if parts:
            return " ".join(parts)
        return self.email.split("@", 1)[0]

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    @property
    def is_org_admin(self) -> bool:
        return self.role == UserRole.ORG_ADMIN
