# portal/routers/users.py
import uuid

from fastapi import APIRouter, Depends

from portal.core.auth import require_super_admin
from portal.dependencies import Portal, get_portal
from portal.schemas.auth import SessionRead

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "/{user_id}/impersonate",
    response_model=SessionRead,
    dependencies=[Depends(require_super_admin)],
)
async def impersonate_user(user_id: uuid.UUID, portal: Portal = Depends(get_portal)):
    """
    Continue as another user (super admin only).

    The portal session is replaced; sign out to end the impersonation.
    """
    await portal.admin.impersonate_user(user_id)
    user = await portal.profiles.settle()
    await portal.settings.settle()
    state = portal.session.current
    return SessionRead(status=state.status.value, email=state.email, user=user)
