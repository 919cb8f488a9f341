import uuid
from unittest.mock import Mock

import pytest

from portal.core.authz import AccessDecision
from portal.core.errors import AuthError, AuthorizationError, NotFoundError, TransientRemoteError
from portal.repositories.functions_repo import FunctionsRepository
from portal.schemas.setup import SetupRequest
from portal.services.session_service import SessionStore
from portal.services.setup_service import SetupService


def setup_request(**overrides) -> SetupRequest:
    data = {
        "org_name": "Acme Corp",
        "org_shortname": "acme",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "root@acme.example.com",
        "password": "correct-horse",
    }
    data.update(overrides)
    return SetupRequest(**data)


class TestSetupService:
    def setup_method(self):
        self.functions = Mock(spec=FunctionsRepository)
        self.session = Mock(spec=SessionStore)
        self.service = SetupService(self.functions, self.session)

    @pytest.mark.asyncio
    async def test_open_while_no_super_admin(self):
        self.functions.exists_super_admin.return_value = False

        assert await self.service.check_access() == AccessDecision.ALLOW

    @pytest.mark.asyncio
    async def test_closed_once_super_admin_exists(self):
        self.functions.exists_super_admin.return_value = True

        assert await self.service.check_access() == AccessDecision.SETUP_COMPLETE

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            TransientRemoteError("timeout"),
            NotFoundError("check super admin: not found"),
            AuthError("JWT expired"),
            RuntimeError("boom"),
        ],
    )
    async def test_check_failure_fails_open(self, error):
        self.functions.exists_super_admin.side_effect = error

        assert await self.service.check_access() == AccessDecision.ALLOW

    @pytest.mark.asyncio
    async def test_create_initial_setup(self):
        user_id = uuid.uuid4()
        self.functions.exists_super_admin.return_value = False
        self.session.sign_up.return_value = user_id
        self.functions.create_initial_setup.return_value = {"organization_id": "org-1"}

        result = await self.service.create_initial_setup(setup_request())

        assert result.user_id == str(user_id)
        assert result.setup == {"organization_id": "org-1"}
        self.session.sign_up.assert_awaited_once_with("root@acme.example.com", "correct-horse")
        self.functions.create_initial_setup.assert_awaited_once_with(
            org_name="Acme Corp",
            org_shortname="acme",
            user_id=user_id,
            email="root@acme.example.com",
            first_name="Ada",
            last_name="Lovelace",
        )

    @pytest.mark.asyncio
    async def test_second_setup_is_refused(self):
        self.functions.exists_super_admin.return_value = True

        with pytest.raises(AuthorizationError):
            await self.service.create_initial_setup(setup_request())

        self.session.sign_up.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejected_sign_up_stops_setup(self):
        self.functions.exists_super_admin.return_value = False
        self.session.sign_up.side_effect = AuthError("User already registered")

        with pytest.raises(AuthError):
            await self.service.create_initial_setup(setup_request())

        self.functions.create_initial_setup.assert_not_called()


class TestSetupRequest:
    def test_shortname_format(self):
        with pytest.raises(ValueError):
            setup_request(org_shortname="Acme Corp")

    def test_names_are_trimmed(self):
        assert setup_request(org_name="  Acme Corp  ").org_name == "Acme Corp"

    def test_blank_names_rejected(self):
        with pytest.raises(ValueError):
            setup_request(first_name="   ")
