# portal/routers/setup.py
from fastapi import APIRouter, Depends, status

from portal.core.auth import require_setup_open
from portal.dependencies import Portal, get_portal
from portal.schemas.setup import SetupRequest, SetupResult, SetupStatus

router = APIRouter(
    prefix="/setup",
    tags=["Setup"],
    dependencies=[Depends(require_setup_open)],
)


@router.get("", response_model=SetupStatus)
def setup_page():
    """
    First-run setup page. Redirects to the sign-in page once a super admin
    exists.
    """
    return SetupStatus(setup_available=True)


@router.post("", response_model=SetupResult, status_code=status.HTTP_201_CREATED)
async def create_initial_setup(payload: SetupRequest, portal: Portal = Depends(get_portal)):
    """
    Create the first organization and its super admin.

    Errors:
      - 401: sign-up rejected
      - 403: setup already completed
    """
    return await portal.setup.create_initial_setup(payload)
