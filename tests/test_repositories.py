import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, Mock

import httpx
import pytest
from postgrest.exceptions import APIError

from conftest import ACME_ORG_ID
from portal.core.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    TransientRemoteError,
)
from portal.models.session import ProviderEvent, SessionStatus
from portal.models.setting import SettingEntry
from portal.repositories._utils import remote_call, single_row
from portal.repositories.auth_repo import AuthAdminRepository, AuthRepository
from portal.repositories.functions_repo import FunctionsRepository
from portal.repositories.settings_repo import SettingsRepository


def api_error(code: str, message: str = "error") -> APIError:
    return APIError({"message": message, "code": code, "hint": None, "details": None})


def query_chain(data=None, error: Exception | None = None) -> MagicMock:
    """A PostgREST request builder whose every filter returns itself."""
    query = MagicMock()
    for name in ("select", "eq", "is_", "or_", "order", "maybe_single", "insert", "upsert"):
        getattr(query, name).return_value = query
    if error is not None:
        query.execute = AsyncMock(side_effect=error)
    else:
        query.execute = AsyncMock(return_value=SimpleNamespace(data=data))
    return query


def supabase_session(subject: uuid.UUID) -> SimpleNamespace:
    return SimpleNamespace(
        access_token="access",
        refresh_token="refresh",
        expires_at=1_900_000_000,
        user=SimpleNamespace(id=str(subject), email="ops@example.com"),
    )


class TestRemoteCall:
    def test_no_rows_is_not_found(self):
        with pytest.raises(NotFoundError):
            with remote_call("fetch profile"):
                raise api_error("PGRST116")

    def test_unique_violation_is_conflict(self):
        with pytest.raises(ConflictError):
            with remote_call("create organization"):
                raise api_error("23505", "duplicate key value")

    def test_other_api_errors_are_transient(self):
        with pytest.raises(TransientRemoteError):
            with remote_call("list users"):
                raise api_error("42501", "permission denied")

    def test_network_errors_are_transient(self):
        with pytest.raises(TransientRemoteError):
            with remote_call("list users"):
                raise httpx.ConnectError("connection refused")

    def test_single_row(self):
        assert single_row(SimpleNamespace(data={"id": 1}), "Row") == {"id": 1}
        assert single_row(SimpleNamespace(data=[{"id": 2}]), "Row") == {"id": 2}
        with pytest.raises(NotFoundError):
            single_row(None, "Row")
        with pytest.raises(NotFoundError):
            single_row(SimpleNamespace(data=None), "Row")


class TestSettingsRepository:
    @pytest.mark.asyncio
    async def test_global_lookup_filters_on_null_organization(self):
        query = query_chain({"key": "app_name", "value": "Default Portal", "organization_id": None})
        client = MagicMock()
        client.table.return_value = query

        entry = await SettingsRepository(client).get("app_name", None)

        assert entry.value == "Default Portal"
        client.table.assert_called_once_with("app_settings")
        query.is_.assert_called_once_with("organization_id", "null")

    @pytest.mark.asyncio
    async def test_organization_lookup(self):
        query = query_chain(
            {"key": "app_name", "value": "Acme Portal", "organization_id": str(ACME_ORG_ID)}
        )
        client = MagicMock()
        client.table.return_value = query

        entry = await SettingsRepository(client).get("app_name", ACME_ORG_ID)

        assert entry.organization_id == ACME_ORG_ID
        query.eq.assert_any_call("organization_id", str(ACME_ORG_ID))
        query.is_.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_entry(self):
        client = MagicMock()
        client.table.return_value = query_chain(None)

        with pytest.raises(NotFoundError):
            await SettingsRepository(client).get("app_name", ACME_ORG_ID)

    @pytest.mark.asyncio
    async def test_upsert_targets_key_and_organization(self):
        query = query_chain([])
        client = MagicMock()
        client.table.return_value = query

        await SettingsRepository(client).upsert(
            SettingEntry(key="app_name", value="Acme Portal", organization_id=ACME_ORG_ID)
        )

        query.upsert.assert_called_once_with(
            {"key": "app_name", "value": "Acme Portal", "organization_id": str(ACME_ORG_ID)},
            on_conflict="key,organization_id",
        )

    @pytest.mark.asyncio
    async def test_upsert_failure_is_transient(self):
        client = MagicMock()
        client.table.return_value = query_chain(error=api_error("PGRST301", "JWT expired"))

        with pytest.raises(TransientRemoteError):
            await SettingsRepository(client).upsert(SettingEntry(key="app_name", value="x"))


class TestAuthRepository:
    @pytest.mark.asyncio
    async def test_authenticate_maps_session(self):
        subject = uuid.uuid4()
        client = MagicMock()
        client.auth.sign_in_with_password = AsyncMock(
            return_value=SimpleNamespace(session=supabase_session(subject))
        )

        state = await AuthRepository(client).authenticate("ops@example.com", "secret")

        assert state.status == SessionStatus.AUTHENTICATED
        assert state.subject_id == subject
        assert state.tokens.refresh_token == "refresh"

    @pytest.mark.asyncio
    async def test_authenticate_without_session_is_auth_error(self):
        client = MagicMock()
        client.auth.sign_in_with_password = AsyncMock(return_value=SimpleNamespace(session=None))

        with pytest.raises(AuthError):
            await AuthRepository(client).authenticate("ops@example.com", "secret")

    def test_provider_events_are_translated(self):
        subject = uuid.uuid4()
        client = MagicMock()
        subscription = Mock()
        client.auth.on_auth_state_change.return_value = subscription
        received = []

        unsubscribe = AuthRepository(client).on_event(
            lambda event, state: received.append((event, state))
        )
        callback = client.auth.on_auth_state_change.call_args.args[0]
        callback("SIGNED_IN", supabase_session(subject))
        callback("INITIAL_SESSION", None)
        callback("SIGNED_OUT", None)

        assert [event for event, _ in received] == [ProviderEvent.SIGNED_IN, ProviderEvent.SIGNED_OUT]
        assert received[0][1].subject_id == subject
        assert received[1][1] is None
        assert unsubscribe == subscription.unsubscribe


class TestAuthAdminRepository:
    @pytest.mark.asyncio
    async def test_requires_service_role_client(self):
        with pytest.raises(RuntimeError, match="SUPABASE_SERVICE_ROLE_KEY"):
            await AuthAdminRepository(None).invite_user("x@acme.example.com", {}, "https://x")


class TestFunctionsRepository:
    @pytest.mark.asyncio
    async def test_impersonate_returns_tokens(self):
        client = MagicMock()
        client.functions.invoke = AsyncMock(
            return_value={"access_token": "a", "refresh_token": "r"}
        )
        user_id = uuid.uuid4()

        tokens = await FunctionsRepository(client).impersonate(user_id)

        assert (tokens.access_token, tokens.refresh_token) == ("a", "r")
        assert client.functions.invoke.await_args.kwargs["invoke_options"]["body"] == {
            "user_id": str(user_id)
        }

    @pytest.mark.asyncio
    async def test_impersonate_without_tokens_fails(self):
        client = MagicMock()
        client.functions.invoke = AsyncMock(return_value={"error": "not allowed"})

        with pytest.raises(TransientRemoteError):
            await FunctionsRepository(client).impersonate(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_super_admin_exists(self):
        query = query_chain(True)
        client = MagicMock()
        client.rpc.return_value = query

        assert await FunctionsRepository(client).exists_super_admin() is True
        client.rpc.assert_called_once_with("check_super_admin_exists")
