# portal/schemas/settings.py
import uuid

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class AppNameUpdate(SQLModel):
    """Branding form payload (3-50 characters)."""

    model_config = ConfigDict(extra="forbid")

    value: str = Field(min_length=3, max_length=50)

    @field_validator("value")
    @classmethod
    def normalize_value(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("app name must be at least 3 characters")
        return v


class OrganizationSettingsRead(SQLModel):
    app_name: str
    global_app_name: str | None = None
    organization_id: uuid.UUID | None = None
    can_edit_global: bool = False


class SettingUpdateResult(SQLModel):
    key: str
    value: str
    organization_id: uuid.UUID | None = None
    updated: bool
