# portal/schemas/organization.py
import re

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from portal.models.organization import SHORTNAME_PATTERN

_SHORTNAME_RE = re.compile(SHORTNAME_PATTERN)


def validate_shortname(v: str) -> str:
    v = v.strip()
    if not _SHORTNAME_RE.match(v):
        raise ValueError(
            "shortname may only contain lowercase letters, numbers, and hyphens"
        )
    return v


def validate_required_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("value cannot be empty")
    return v


class OrganizationCreate(SQLModel):
    """Payload for creating an organization (super admin only)."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=200)
    shortname: str = Field(max_length=63)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return validate_required_text(v)

    @field_validator("shortname")
    @classmethod
    def check_shortname(cls, v: str) -> str:
        return validate_shortname(v)
