# portal/repositories/organization_repo.py
from supabase import AsyncClient

from portal.models.organization import Organization
from portal.repositories._utils import remote_call, single_row

TABLE = "organizations"


class OrganizationRepository:
    """Data access layer for public.organizations."""

    def __init__(self, client: AsyncClient):
        self.client = client

    async def list(self) -> list[Organization]:
        with remote_call("list organizations"):
            response = await (
                self.client.table(TABLE).select("*").order("name").execute()
            )
        return [Organization.model_validate(row) for row in response.data or []]

    async def create(self, name: str, shortname: str) -> Organization:
        """
        Insert a new organization.

        Raises:
            ConflictError: if the shortname is already taken.
        """
        with remote_call("create organization"):
            response = await (
                self.client.table(TABLE)
                .insert({"name": name, "shortname": shortname})
                .execute()
            )
        return Organization.model_validate(single_row(response, "Organization"))
