# portal/routers/dashboard.py
from fastapi import APIRouter, Depends

from portal.core.auth import require_auth, require_super_admin
from portal.dependencies import Portal, get_portal
from portal.models.setting import APP_NAME_KEY
from portal.models.user import UserProfile
from portal.schemas.dashboard import DashboardRead, SyncResult

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardRead)
def dashboard(
    current_user: UserProfile = Depends(require_auth),
    portal: Portal = Depends(get_portal),
):
    """
    Landing page after sign-in.

    Auth:
      - any signed-in role
    """
    return DashboardRead(
        user=current_user,
        app_name=portal.settings.current(APP_NAME_KEY),
        is_super_admin=current_user.is_super_admin,
        is_org_admin=current_user.is_org_admin,
    )


@router.post(
    "/sync",
    response_model=SyncResult,
    dependencies=[Depends(require_super_admin)],
)
async def sync_external_database(portal: Portal = Depends(get_portal)):
    """Trigger the sync-external-db edge function (super admin only)."""
    result = await portal.admin.sync_external_database()
    return SyncResult(result=result)
