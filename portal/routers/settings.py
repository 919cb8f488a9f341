# portal/routers/settings.py
from fastapi import APIRouter, Depends, HTTPException, status

from portal.core.auth import redirect_for, require_auth
from portal.core.authz import AccessDecision, can_manage_organization
from portal.dependencies import Portal, get_portal
from portal.models.setting import APP_NAME_KEY
from portal.models.user import UserProfile
from portal.schemas.settings import (
    AppNameUpdate,
    OrganizationSettingsRead,
    SettingUpdateResult,
)

router = APIRouter(prefix="/organization-settings", tags=["Settings"])


@router.get("", response_model=OrganizationSettingsRead)
async def read_settings(
    current_user: UserProfile = Depends(require_auth),
    portal: Portal = Depends(get_portal),
):
    """
    Branding settings for the operator's organization.

    Super admins also see the global value they are allowed to edit.
    """
    global_app_name = None
    if current_user.is_super_admin:
        global_app_name = await portal.settings.global_value(APP_NAME_KEY)

    return OrganizationSettingsRead(
        app_name=portal.settings.current(APP_NAME_KEY),
        global_app_name=global_app_name,
        organization_id=current_user.organization_id,
        can_edit_global=current_user.is_super_admin,
    )


@router.put("/app-name", response_model=SettingUpdateResult)
async def update_app_name(
    payload: AppNameUpdate,
    current_user: UserProfile = Depends(require_auth),
    portal: Portal = Depends(get_portal),
):
    """
    Set the app name for the operator's own organization.

    Auth:
      - org_admin of the organization, or super_admin
    """
    organization_id = current_user.organization_id
    if organization_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Your profile is not attached to an organization",
        )

    decision = can_manage_organization(current_user, organization_id)
    if decision != AccessDecision.ALLOW:
        raise redirect_for(decision)

    updated = await portal.settings.update(APP_NAME_KEY, payload.value, organization_id)
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to update app name",
        )
    return SettingUpdateResult(
        key=APP_NAME_KEY,
        value=payload.value,
        organization_id=organization_id,
        updated=True,
    )


@router.put("/global-app-name", response_model=SettingUpdateResult)
async def update_global_app_name(
    payload: AppNameUpdate,
    current_user: UserProfile = Depends(require_auth),
    portal: Portal = Depends(get_portal),
):
    """
    Set the global app name (the default for every organization).

    Errors:
      - 403: caller is not super_admin (checked by the settings resolver)
    """
    updated = await portal.settings.update(APP_NAME_KEY, payload.value)
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to update global app name",
        )
    return SettingUpdateResult(key=APP_NAME_KEY, value=payload.value, updated=True)
