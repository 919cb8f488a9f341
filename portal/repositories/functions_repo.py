# portal/repositories/functions_repo.py
import uuid
from typing import Any

from supabase import AsyncClient

from portal.core.errors import TransientRemoteError
from portal.models.session import SessionTokens
from portal.repositories._utils import remote_call


class FunctionsRepository:
    """
    Security-definer RPC functions and edge functions.

    RPC:
      - check_super_admin_exists() -> bool
      - create_initial_setup(org_name, org_shortname, user_email,
        user_first_name, user_last_name, user_id)

    Edge functions:
      - impersonate-user {user_id} -> {access_token, refresh_token}
      - sync-external-db
    """

    def __init__(self, client: AsyncClient):
        self.client = client

    async def exists_super_admin(self) -> bool:
        """Side-effect-free existence check."""
        with remote_call("check super admin"):
            response = await self.client.rpc("check_super_admin_exists").execute()
        return bool(response.data)

    async def create_initial_setup(
        self,
        *,
        org_name: str,
        org_shortname: str,
        user_id: uuid.UUID,
        email: str,
        first_name: str,
        last_name: str,
    ) -> Any:
        with remote_call("initial setup"):
            response = await self.client.rpc(
                "create_initial_setup",
                {
                    "org_name": org_name,
                    "org_shortname": org_shortname,
                    "user_email": email,
                    "user_first_name": first_name,
                    "user_last_name": last_name,
                    "user_id": str(user_id),
                },
            ).execute()
        return response.data

    async def impersonate(self, user_id: uuid.UUID) -> SessionTokens:
        with remote_call("impersonate user"):
            data = await self.client.functions.invoke(
                "impersonate-user",
                invoke_options={
                    "body": {"user_id": str(user_id)},
                    "responseType": "json",
                },
            )
        if not isinstance(data, dict) or "access_token" not in data:
            raise TransientRemoteError("impersonate user failed: no tokens returned")
        return SessionTokens(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
        )

    async def sync_external_database(self) -> Any:
        with remote_call("sync external database"):
            return await self.client.functions.invoke(
                "sync-external-db",
                invoke_options={"responseType": "json"},
            )
