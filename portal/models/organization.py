# portal/models/organization.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel

# Lowercase letters, digits and hyphens; used for role identification.
SHORTNAME_PATTERN = r"^[a-z0-9-]+$"


class Organization(SQLModel):
    """
    Row of public.organizations (a tenant).

    Created only by a super_admin. id and shortname never change after
    creation.
    """

    id: uuid.UUID
    name: str
    shortname: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
