# portal/schemas/user.py
import uuid

from pydantic import EmailStr, ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

from portal.models.user import UserRole
from portal.schemas.organization import validate_required_text


class UserInvite(SQLModel):
    """
    Invite a user into an organization.

    The user receives an e-mail and chooses a password on the
    reset-password page. super_admin cannot be granted through an
    invitation.
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    role: UserRole = UserRole.USER

    @field_validator("first_name", "last_name")
    @classmethod
    def normalize_names(cls, v: str) -> str:
        return validate_required_text(v)

    @field_validator("role")
    @classmethod
    def organization_role_only(cls, v: UserRole) -> UserRole:
        if v == UserRole.SUPER_ADMIN:
            raise ValueError("super_admin cannot be assigned inside an organization")
        return v


class UserCreate(UserInvite):
    """Create a user directly with a password (auto-confirmed)."""

    password: str = Field(min_length=8)


class ProfileCreate(SQLModel):
    """
    Row written to public.users after the auth user exists.

    Non-super-admin profiles must name an organization.
    """

    id: uuid.UUID
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: UserRole
    organization_id: uuid.UUID | None = None

    @model_validator(mode="after")
    def organization_required(self) -> "ProfileCreate":
        if self.role != UserRole.SUPER_ADMIN and self.organization_id is None:
            raise ValueError("organization_id is required for this role")
        return self
