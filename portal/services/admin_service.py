# portal/services/admin_service.py
import logging
import uuid
from typing import Any

from portal.models.organization import Organization
from portal.models.role import Role
from portal.models.user import UserProfile
from portal.repositories.auth_repo import AuthAdminRepository
from portal.repositories.functions_repo import FunctionsRepository
from portal.repositories.organization_repo import OrganizationRepository
from portal.repositories.role_repo import RoleRepository
from portal.repositories.user_repo import UserRepository
from portal.schemas.organization import OrganizationCreate
from portal.schemas.role import RoleCreate
from portal.schemas.user import ProfileCreate, UserCreate, UserInvite
from portal.services.session_service import SessionStore

logger = logging.getLogger(__name__)


class AdminService:
    """
    Organization, user and role administration.

    Responsibilities:
      - orchestrate repository operations
      - keep auth users and profile rows in step
    Route guards decide who may call what; nothing here re-checks roles.
    """

    def __init__(
        self,
        *,
        organizations: OrganizationRepository,
        users: UserRepository,
        roles: RoleRepository,
        auth_admin: AuthAdminRepository,
        functions: FunctionsRepository,
        session: SessionStore,
        reset_password_url: str,
    ):
        self.organizations = organizations
        self.users = users
        self.roles = roles
        self.auth_admin = auth_admin
        self.functions = functions
        self.session = session
        self.reset_password_url = reset_password_url

    # ----- Organizations -----

    async def list_organizations(self) -> list[Organization]:
        return await self.organizations.list()

    async def create_organization(self, payload: OrganizationCreate) -> Organization:
        organization = await self.organizations.create(payload.name, payload.shortname)
        logger.info("Created organization %s", organization.shortname)
        return organization

    # ----- Users -----

    async def list_users(self, organization_id: uuid.UUID) -> list[UserProfile]:
        return await self.users.list_by_organization(organization_id)

    async def create_user(
        self,
        organization_id: uuid.UUID,
        payload: UserCreate,
    ) -> UserProfile:
        """Create an auto-confirmed auth user and its profile row."""
        user_id = await self.auth_admin.create_user(
            payload.email,
            payload.password,
            metadata={"first_name": payload.first_name, "last_name": payload.last_name},
        )
        return await self._create_profile(user_id, organization_id, payload)

    async def invite_user(
        self,
        organization_id: uuid.UUID,
        payload: UserInvite,
    ) -> UserProfile:
        """
        Send an invitation e-mail; the link opens the reset-password page
        where the user picks a password.
        """
        user_id = await self.auth_admin.invite_user(
            payload.email,
            metadata={"first_name": payload.first_name, "last_name": payload.last_name},
            redirect_to=f"{self.reset_password_url}?type=signup",
        )
        profile = await self._create_profile(user_id, organization_id, payload)
        logger.info("Invited %s into organization %s", payload.email, organization_id)
        return profile

    async def _create_profile(
        self,
        user_id: uuid.UUID,
        organization_id: uuid.UUID,
        payload: UserInvite,
    ) -> UserProfile:
        return await self.users.create(
            ProfileCreate(
                id=user_id,
                email=payload.email,
                first_name=payload.first_name,
                last_name=payload.last_name,
                role=payload.role,
                organization_id=organization_id,
            )
        )

    # ----- Roles -----

    async def list_roles(self, organization_id: uuid.UUID) -> list[Role]:
        return await self.roles.list_for_organization(organization_id)

    async def create_role(self, organization_id: uuid.UUID, payload: RoleCreate) -> Role:
        return await self.roles.create(payload.name, organization_id, payload.permissions)

    # ----- Super admin tools -----

    async def impersonate_user(self, user_id: uuid.UUID) -> None:
        """
        Switch the portal session to another user. The profile follows
        through the Session Store -> Profile Resolver chain.
        """
        tokens = await self.functions.impersonate(user_id)
        await self.session.adopt(tokens)
        logger.warning("Session switched to impersonated user %s", user_id)

    async def sync_external_database(self) -> Any:
        return await self.functions.sync_external_database()
