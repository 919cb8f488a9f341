# portal/routers/organizations.py
import uuid

from fastapi import APIRouter, Depends, status

from portal.core.auth import require_organization_admin, require_super_admin
from portal.dependencies import Portal, get_portal
from portal.models.organization import Organization
from portal.models.role import Role
from portal.models.user import UserProfile
from portal.schemas.organization import OrganizationCreate
from portal.schemas.role import RoleCreate
from portal.schemas.user import UserCreate, UserInvite

router = APIRouter(prefix="/organizations", tags=["Organizations"])


# -------- Super admin --------


@router.get(
    "",
    response_model=list[Organization],
    dependencies=[Depends(require_super_admin)],
)
async def list_organizations(portal: Portal = Depends(get_portal)):
    """List all organizations (super admin only)."""
    return await portal.admin.list_organizations()


@router.post(
    "",
    response_model=Organization,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_super_admin)],
)
async def create_organization(
    payload: OrganizationCreate,
    portal: Portal = Depends(get_portal),
):
    """
    Create an organization (super admin only).

    Errors:
      - 409: shortname already taken
    """
    return await portal.admin.create_organization(payload)


# -------- Organization admin --------


@router.get(
    "/{organization_id}/users",
    response_model=list[UserProfile],
    dependencies=[Depends(require_organization_admin)],
)
async def list_users(organization_id: uuid.UUID, portal: Portal = Depends(get_portal)):
    return await portal.admin.list_users(organization_id)


@router.post(
    "/{organization_id}/users",
    response_model=UserProfile,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_organization_admin)],
)
async def create_user(
    organization_id: uuid.UUID,
    payload: UserCreate,
    portal: Portal = Depends(get_portal),
):
    """Create a confirmed user with a password in this organization."""
    return await portal.admin.create_user(organization_id, payload)


@router.post(
    "/{organization_id}/invitations",
    response_model=UserProfile,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_organization_admin)],
)
async def invite_user(
    organization_id: uuid.UUID,
    payload: UserInvite,
    portal: Portal = Depends(get_portal),
):
    """Invite a user by e-mail; they set their password from the link."""
    return await portal.admin.invite_user(organization_id, payload)


@router.get(
    "/{organization_id}/roles",
    response_model=list[Role],
    dependencies=[Depends(require_organization_admin)],
)
async def list_roles(organization_id: uuid.UUID, portal: Portal = Depends(get_portal)):
    """Organization roles plus system-wide roles."""
    return await portal.admin.list_roles(organization_id)


@router.post(
    "/{organization_id}/roles",
    response_model=Role,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_organization_admin)],
)
async def create_role(
    organization_id: uuid.UUID,
    payload: RoleCreate,
    portal: Portal = Depends(get_portal),
):
    return await portal.admin.create_role(organization_id, payload)
