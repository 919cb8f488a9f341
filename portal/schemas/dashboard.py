# portal/schemas/dashboard.py
from typing import Any

from sqlmodel import SQLModel

from portal.models.user import UserProfile


class DashboardRead(SQLModel):
    user: UserProfile
    app_name: str
    is_super_admin: bool
    is_org_admin: bool


class LoginPage(SQLModel):
    """What the sign-in page needs before anyone is signed in."""

    app_name: str
    setup_available: bool
    signed_in: bool


class SyncResult(SQLModel):
    status: str = "ok"
    result: Any = None
