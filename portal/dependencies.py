# portal/dependencies.py
from dataclasses import dataclass

from fastapi import Request
from supabase import AsyncClient

from portal.core.config import Settings
from portal.core.token_storage import FileTokenStorage
from portal.models.setting import APP_NAME_KEY
from portal.repositories.auth_repo import AuthAdminRepository, AuthRepository
from portal.repositories.functions_repo import FunctionsRepository
from portal.repositories.organization_repo import OrganizationRepository
from portal.repositories.role_repo import RoleRepository
from portal.repositories.settings_repo import SettingsRepository
from portal.repositories.user_repo import UserRepository
from portal.services.admin_service import AdminService
from portal.services.profile_service import ProfileResolver
from portal.services.session_service import SessionStore
from portal.services.settings_service import SettingsResolver
from portal.services.setup_service import SetupService


@dataclass
class Portal:
    """
    The portal's components, wired once per process.

    Ownership: session -> identity, profiles -> current user,
    settings -> resolved settings. Everything else reads them.
    """

    session: SessionStore
    profiles: ProfileResolver
    settings: SettingsResolver
    setup: SetupService
    admin: AdminService

    def attach(self) -> None:
        """Wire the subscription chain: session -> profiles -> settings."""
        self.session.attach()
        self.profiles.attach()
        self.settings.attach()

    def detach(self) -> None:
        self.settings.detach()
        self.profiles.detach()
        self.session.detach()


def build_portal(
    settings: Settings,
    client: AsyncClient,
    admin_client: AsyncClient | None = None,
) -> Portal:
    functions = FunctionsRepository(client)
    users = UserRepository(client)

    session = SessionStore(
        AuthRepository(client),
        FileTokenStorage(settings.SESSION_STORAGE_PATH),
        storage_key=settings.SESSION_STORAGE_KEY,
        jwt_secret=settings.SUPABASE_JWT_SECRET,
        jwt_algorithm=settings.SUPABASE_JWT_ALG,
    )
    profiles = ProfileResolver(users, session)
    resolver = SettingsResolver(
        SettingsRepository(client),
        profiles,
        fallbacks={APP_NAME_KEY: settings.APP_NAME},
    )

    return Portal(
        session=session,
        profiles=profiles,
        settings=resolver,
        setup=SetupService(functions, session),
        admin=AdminService(
            organizations=OrganizationRepository(client),
            users=users,
            roles=RoleRepository(client),
            auth_admin=AuthAdminRepository(admin_client),
            functions=functions,
            session=session,
            reset_password_url=f"{settings.PUBLIC_BASE_URL}/reset-password",
        ),
    )


def get_portal(request: Request) -> Portal:
    """
    FastAPI dependency returning the process-wide Portal.

    Usage:

        @router.get("/example")
        async def example(portal: Portal = Depends(get_portal)):
            ...
    """
    return request.app.state.portal
