# portal/repositories/settings_repo.py
import uuid

from supabase import AsyncClient

from portal.models.setting import SettingEntry
from portal.repositories._utils import remote_call, single_row

TABLE = "app_settings"


class SettingsRepository:
    """
    Data access layer for public.app_settings.

    organization_id = None addresses the global entry of a key.
    """

    def __init__(self, client: AsyncClient):
        self.client = client

    async def get(self, key: str, organization_id: uuid.UUID | None) -> SettingEntry:
        """
        Raises:
            NotFoundError: if there is no entry for (key, organization_id).
            TransientRemoteError: on network/server failure.
        """
        query = self.client.table(TABLE).select("*").eq("key", key)
        if organization_id is None:
            query = query.is_("organization_id", "null")
        else:
            query = query.eq("organization_id", str(organization_id))

        with remote_call("fetch setting"):
            response = await query.maybe_single().execute()
        return SettingEntry.model_validate(single_row(response, f"Setting {key!r}"))

    async def upsert(self, entry: SettingEntry) -> None:
        with remote_call("save setting"):
            await (
                self.client.table(TABLE)
                .upsert(
                    entry.model_dump(mode="json"),
                    on_conflict="key,organization_id",
                )
                .execute()
            )
