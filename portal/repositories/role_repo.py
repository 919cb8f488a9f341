# portal/repositories/role_repo.py
import uuid

from supabase import AsyncClient

from portal.models.role import Role
from portal.repositories._utils import remote_call, single_row

TABLE = "roles"


class RoleRepository:
    """Data access layer for public.roles."""

    def __init__(self, client: AsyncClient):
        self.client = client

    async def list_for_organization(self, organization_id: uuid.UUID) -> list[Role]:
        """Roles visible to an organization: its own plus system-wide roles."""
        with remote_call("list roles"):
            response = await (
                self.client.table(TABLE)
                .select("*")
                .or_(f"organization_id.eq.{organization_id},organization_id.is.null")
                .execute()
            )
        return [Role.model_validate(row) for row in response.data or []]

    async def create(
        self,
        name: str,
        organization_id: uuid.UUID,
        permissions: list[str],
    ) -> Role:
        with remote_call("create role"):
            response = await (
                self.client.table(TABLE)
                .insert(
                    {
                        "name": name,
                        "organization_id": str(organization_id),
                        "is_system_role": False,
                        "permissions": permissions,
                    }
                )
                .execute()
            )
        return Role.model_validate(single_row(response, "Role"))
