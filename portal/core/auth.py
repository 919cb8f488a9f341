# portal/core/auth.py
import uuid
from typing import Callable

from fastapi import Depends, HTTPException, status

from portal.core.authz import (
    AccessDecision,
    can_access,
    can_access_super_admin,
    can_manage_organization,
)
from portal.core.config import get_settings
from portal.dependencies import Portal, get_portal
from portal.models.user import UserProfile, UserRole


def get_current_user(portal: Portal = Depends(get_portal)) -> UserProfile | None:
    """
    Snapshot of the current user for this request.

    FastAPI caches dependencies per request, so every guard on a route
    sees the same single snapshot and none of them waits for a change.
    """
    return portal.profiles.current_user.first()


def redirect_for(decision: AccessDecision) -> HTTPException:
    """
    Translate a denial into a 303 redirect.

      - DENY_UNAUTHENTICATED, SETUP_COMPLETE -> sign-in page
      - DENY_FORBIDDEN -> unauthorized page
    """
    settings = get_settings()
    if decision == AccessDecision.DENY_FORBIDDEN:
        location, detail = settings.UNAUTHORIZED_PATH, "Insufficient role"
    elif decision == AccessDecision.SETUP_COMPLETE:
        location, detail = settings.LOGIN_PATH, "Setup has already been completed"
    else:
        location, detail = settings.LOGIN_PATH, "Authentication required"
    return HTTPException(
        status_code=status.HTTP_303_SEE_OTHER,
        detail=detail,
        headers={"Location": location},
    )


def require_auth(user: UserProfile | None = Depends(get_current_user)) -> UserProfile:
    """
    Enforce authentication.

    Guests are redirected to the sign-in page.
    """
    decision = can_access(user)
    if decision != AccessDecision.ALLOW:
        raise redirect_for(decision)
    return user


def require_role(role: UserRole) -> Callable[..., UserProfile]:
    """
    Dependency factory: authenticated and holding exactly `role`.

        @router.get("/x", dependencies=[Depends(require_role(UserRole.ORG_ADMIN))])
    """

    def dependency(user: UserProfile | None = Depends(get_current_user)) -> UserProfile:
        decision = can_access(user, role)
        if decision != AccessDecision.ALLOW:
            raise redirect_for(decision)
        return user

    return dependency


def require_super_admin(user: UserProfile = Depends(require_auth)) -> UserProfile:
    """
    Enforce super admin role (after authentication, so guests still go to
    the sign-in page).
    """
    decision = can_access_super_admin(user)
    if decision != AccessDecision.ALLOW:
        raise redirect_for(decision)
    return user


def require_organization_admin(
    organization_id: uuid.UUID,
    user: UserProfile = Depends(require_auth),
) -> UserProfile:
    """
    Enforce administration rights over the organization in the path:
    super_admin, or org_admin of that organization.
    """
    decision = can_manage_organization(user, organization_id)
    if decision != AccessDecision.ALLOW:
        raise redirect_for(decision)
    return user


async def require_setup_open(portal: Portal = Depends(get_portal)) -> None:
    """
    Allow the setup flow only while no super admin exists. Fails open if
    the existence check errors.
    """
    decision = await portal.setup.check_access()
    if decision != AccessDecision.ALLOW:
        raise redirect_for(decision)
