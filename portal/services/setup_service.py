# portal/services/setup_service.py
import logging

from portal.core.authz import AccessDecision, setup_access
from portal.core.errors import AuthorizationError, PortalError
from portal.repositories.functions_repo import FunctionsRepository
from portal.schemas.setup import SetupRequest, SetupResult
from portal.services.session_service import SessionStore

logger = logging.getLogger(__name__)


class SetupService:
    """
    First-run bootstrap: create the first organization and its super admin.
    """

    def __init__(self, functions: FunctionsRepository, session: SessionStore):
        self.functions = functions
        self.session = session

    async def check_access(self) -> AccessDecision:
        """
        Open while no super admin exists.

        Any failure of the existence check fails open (ALLOW); the
        create_initial_setup function refuses a second setup.
        """
        try:
            exists = await self.functions.exists_super_admin()
        except PortalError as exc:
            logger.error("Error checking if super admin exists: %s", exc)
            return AccessDecision.ALLOW
        except Exception:
            logger.exception("Unexpected error checking if super admin exists")
            return AccessDecision.ALLOW
        return setup_access(exists)

    async def create_initial_setup(self, payload: SetupRequest) -> SetupResult:
        """
        Sign the operator up, then create organization + super_admin
        profile in one security-definer call.

        Raises:
            AuthorizationError: setup already completed.
            AuthError: sign-up rejected.
            TransientRemoteError: network/server failure.
        """
        if await self.check_access() != AccessDecision.ALLOW:
            raise AuthorizationError("Setup has already been completed")

        user_id = await self.session.sign_up(payload.email, payload.password)

        data = await self.functions.create_initial_setup(
            org_name=payload.org_name,
            org_shortname=payload.org_shortname,
            user_id=user_id,
            email=payload.email,
            first_name=payload.first_name,
            last_name=payload.last_name,
        )
        logger.info("Initial setup completed for organization %s", payload.org_shortname)
        return SetupResult(user_id=str(user_id), setup=data)
