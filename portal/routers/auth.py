# portal/routers/auth.py
from fastapi import APIRouter, Depends, status

from portal.core.auth import require_auth
from portal.core.config import get_settings
from portal.dependencies import Portal, get_portal
from portal.models.setting import APP_NAME_KEY
from portal.models.user import UserProfile
from portal.schemas.auth import (
    LoginRequest,
    LoginResponse,
    PasswordResetRequest,
    PasswordUpdate,
    SessionRead,
)

router = APIRouter(tags=["Auth"])


@router.post("/auth/login", response_model=LoginResponse)
async def login(payload: LoginRequest, portal: Portal = Depends(get_portal)):
    """
    Sign in with e-mail and password.

    Waits for the profile (and the organization's app name) to resolve so
    the response reflects the new session.

    Errors:
      - 401: bad credentials / unconfirmed account
    """
    await portal.session.sign_in(payload.email, payload.password)
    user = await portal.profiles.settle()
    await portal.settings.settle()
    return LoginResponse(user=user, app_name=portal.settings.current(APP_NAME_KEY))


@router.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(portal: Portal = Depends(get_portal)):
    """Sign out. Safe to call when already signed out."""
    await portal.session.sign_out()


@router.get("/auth/me", response_model=UserProfile)
def read_me(current_user: UserProfile = Depends(require_auth)):
    """Return the signed-in operator's profile."""
    return current_user


@router.get("/auth/session", response_model=SessionRead)
def read_session(portal: Portal = Depends(get_portal)):
    """Session status as seen by the portal (never includes tokens)."""
    state = portal.session.current
    return SessionRead(
        status=state.status.value,
        email=state.email,
        user=portal.profiles.current_user.first(),
    )


@router.post("/auth/password-reset", status_code=status.HTTP_202_ACCEPTED)
async def request_password_reset(
    payload: PasswordResetRequest,
    portal: Portal = Depends(get_portal),
):
    """Send a password reset e-mail linking to the reset-password page."""
    settings = get_settings()
    await portal.session.send_password_reset(
        payload.email,
        redirect_to=f"{settings.PUBLIC_BASE_URL}/reset-password",
    )
    return {"status": "sent"}


@router.post("/reset-password")
async def reset_password(payload: PasswordUpdate, portal: Portal = Depends(get_portal)):
    """
    Choose a new password.

    Recovery and invitation links carry a token pair; when present, that
    session is adopted first. Otherwise the signed-in operator changes
    their own password.

    Errors:
      - 401: no session / rejected tokens
    """
    tokens = payload.link_tokens()
    if tokens is not None:
        await portal.session.adopt(tokens)
    await portal.session.update_password(payload.password)
    await portal.profiles.settle()
    return {"status": "updated"}
