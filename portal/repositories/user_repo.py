# portal/repositories/user_repo.py
import uuid

from supabase import AsyncClient

from portal.models.user import UserProfile
from portal.repositories._utils import remote_call, single_row
from portal.schemas.user import ProfileCreate

TABLE = "users"


class UserRepository:
    """
    Data access layer for public.users (profiles).

    Responsibilities:
      - Pure table operations (queries + inserts)
      - No FastAPI, no HTTP, no business logic
    """

    def __init__(self, client: AsyncClient):
        self.client = client

    async def get_by_id(self, user_id: uuid.UUID) -> UserProfile:
        """
        Return the profile for an auth subject.

        Raises:
            NotFoundError: if the row does not exist.
            TransientRemoteError: on network/server failure.
        """
        with remote_call("fetch profile"):
            response = await (
                self.client.table(TABLE)
                .select("*")
                .eq("id", str(user_id))
                .maybe_single()
                .execute()
            )
        return UserProfile.model_validate(single_row(response, "Profile"))

    async def list_by_organization(self, organization_id: uuid.UUID) -> list[UserProfile]:
        with remote_call("list users"):
            response = await (
                self.client.table(TABLE)
                .select("*")
                .eq("organization_id", str(organization_id))
                .execute()
            )
        return [UserProfile.model_validate(row) for row in response.data or []]

    async def create(self, profile: ProfileCreate) -> UserProfile:
        """Insert a new profile row and return the persisted row."""
        with remote_call("create profile"):
            response = await (
                self.client.table(TABLE)
                .insert(profile.model_dump(mode="json"))
                .execute()
            )
        return UserProfile.model_validate(single_row(response, "Profile"))
