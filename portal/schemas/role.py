# portal/schemas/role.py
from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from portal.schemas.organization import validate_required_text


class RoleCreate(SQLModel):
    """Custom (non-system) role scoped to one organization."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    permissions: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return validate_required_text(v)

    @field_validator("permissions")
    @classmethod
    def dedupe_permissions(cls, v: list[str]) -> list[str]:
        seen: list[str] = []
        for code in v:
            code = code.strip()
            if code and code not in seen:
                seen.append(code)
        return seen
