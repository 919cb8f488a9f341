# portal/schemas/setup.py
from typing import Any

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from portal.schemas.organization import validate_required_text, validate_shortname


class SetupRequest(SQLModel):
    """
    First-run bootstrap: the first organization and its super admin.
    """

    model_config = ConfigDict(extra="forbid")

    org_name: str = Field(max_length=200)
    org_shortname: str = Field(max_length=63)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: EmailStr
    password: str = Field(min_length=8)

    @field_validator("org_name", "first_name", "last_name")
    @classmethod
    def normalize_text(cls, v: str) -> str:
        return validate_required_text(v)

    @field_validator("org_shortname")
    @classmethod
    def check_shortname(cls, v: str) -> str:
        return validate_shortname(v)


class SetupStatus(SQLModel):
    setup_available: bool


class SetupResult(SQLModel):
    user_id: str
    setup: Any = None
