# portal/routers/pages.py
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, RedirectResponse

from portal.core.authz import AccessDecision
from portal.core.config import get_settings
from portal.dependencies import Portal, get_portal
from portal.models.setting import APP_NAME_KEY
from portal.schemas.dashboard import LoginPage

router = APIRouter(tags=["Pages"])


@router.get("/")
def root():
    """The portal opens on the sign-in page."""
    return RedirectResponse(get_settings().LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/login", response_model=LoginPage)
async def login_page(portal: Portal = Depends(get_portal)):
    """
    Sign-in page data: branding, and whether first-run setup is still
    available (shown as a link when it is).
    """
    decision = await portal.setup.check_access()
    return LoginPage(
        app_name=portal.settings.current(APP_NAME_KEY),
        setup_available=decision == AccessDecision.ALLOW,
        signed_in=portal.profiles.current_user.first() is not None,
    )


@router.get("/unauthorized")
def unauthorized():
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={
            "detail": "You do not have permission to access this page",
            "code": "FORBIDDEN",
        },
    )
