# portal/models/setting.py
import uuid

from sqlmodel import SQLModel

APP_NAME_KEY = "app_name"


class SettingEntry(SQLModel):
    """
    Row of public.app_settings.

    Unique per (key, organization_id); organization_id = None is the
    global entry for the key.
    """

    key: str
    value: str
    organization_id: uuid.UUID | None = None
