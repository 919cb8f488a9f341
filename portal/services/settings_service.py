# portal/services/settings_service.py
import asyncio
import logging
import uuid

from portal.core.errors import AuthorizationError, NotFoundError, TransientRemoteError
from portal.core.observable import ReadOnlyStream, ValueStream
from portal.models.setting import APP_NAME_KEY, SettingEntry
from portal.models.user import UserProfile, UserRole
from portal.repositories.settings_repo import SettingsRepository
from portal.services.profile_service import ProfileResolver

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK = "Admin Portal"


class SettingsResolver:
    """
    Organization-scoped configuration with global fallback.

    Resolution for (key, organization_id):
      1. entry at (key, organization_id), if an organization is given
      2. entry at (key, None), the global entry
      3. the configured fallback for the key

    Lookup errors count as "not found" for that step, so resolve() always
    produces a value.

    For every watched key the resolver publishes the value that applies to
    the current user, re-resolved whenever the current user changes (last
    change wins) and reset to the fallback when nobody is signed in.
    """

    def __init__(
        self,
        repo: SettingsRepository,
        profiles: ProfileResolver,
        fallbacks: dict[str, str] | None = None,
    ):
        self.repo = repo
        self.profiles = profiles
        self.fallbacks = dict(fallbacks or {APP_NAME_KEY: DEFAULT_FALLBACK})

        self._values: dict[str, ValueStream[str]] = {
            key: ValueStream(value) for key, value in self.fallbacks.items()
        }
        self._generation = 0
        # Bumped per key on every successful update; a reload that started
        # before the write must not publish over it.
        self._writes: dict[str, int] = {}
        self._tasks: set[asyncio.Task] = set()
        self._unsubscribe = None

    def attach(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.profiles.current_user.subscribe(self._on_user)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def fallback_for(self, key: str) -> str:
        return self.fallbacks.get(key, DEFAULT_FALLBACK)

    def watch(self, key: str) -> ReadOnlyStream[str]:
        return self._stream(key).as_observable()

    def current(self, key: str) -> str:
        return self._stream(key).value

    @property
    def app_name(self) -> ReadOnlyStream[str]:
        return self.watch(APP_NAME_KEY)

    async def settle(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ----- Resolution -----

    async def resolve(self, key: str, organization_id: uuid.UUID | None = None) -> str:
        if organization_id is not None:
            value = await self._lookup(key, organization_id)
            if value is not None:
                return value

        value = await self._lookup(key, None)
        if value is not None:
            return value

        return self.fallback_for(key)

    async def global_value(self, key: str) -> str | None:
        """The global entry only (no organization, no fallback)."""
        return await self._lookup(key, None)

    async def _lookup(self, key: str, organization_id: uuid.UUID | None) -> str | None:
        try:
            entry = await self.repo.get(key, organization_id)
        except NotFoundError:
            return None
        except TransientRemoteError as exc:
            logger.error(
                "Error loading setting %r for organization %s: %s",
                key,
                organization_id,
                exc,
            )
            return None
        return entry.value

    # ----- Updates -----

    async def update(
        self,
        key: str,
        value: str,
        organization_id: uuid.UUID | None = None,
    ) -> bool:
        """
        Upsert a setting.

        Organization-scoped writes are not role-checked here; the route
        guard in front of the caller decides who may make them. Global
        writes require the current user to be super_admin.

        Returns:
            True when saved (the published value changes immediately),
            False when the remote write failed.

        Raises:
            AuthorizationError: global write by a non-super_admin; nothing
                is written.
        """
        if organization_id is None:
            user = self.profiles.current_user.first()
            if user is None or user.role != UserRole.SUPER_ADMIN:
                raise AuthorizationError("Only super admins can update global settings")

        entry = SettingEntry(key=key, value=value, organization_id=organization_id)
        try:
            await self.repo.upsert(entry)
        except TransientRemoteError as exc:
            logger.error("Error updating setting %r: %s", key, exc)
            return False

        self._writes[key] = self._writes.get(key, 0) + 1
        self._stream(key).next(value)
        return True

    # ----- Current-user tracking -----

    def _stream(self, key: str) -> ValueStream[str]:
        if key not in self._values:
            self._values[key] = ValueStream(self.fallback_for(key))
        return self._values[key]

    def _on_user(self, user: UserProfile | None) -> None:
        self._generation += 1
        if user is None:
            for key, stream in self._values.items():
                stream.next(self.fallback_for(key))
            return

        generation = self._generation
        task = asyncio.get_running_loop().create_task(
            self._reload(user.organization_id, generation)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _reload(self, organization_id: uuid.UUID | None, generation: int) -> None:
        for key in list(self._values):
            writes = self._writes.get(key, 0)
            value = await self.resolve(key, organization_id)
            if generation != self._generation:
                logger.debug("Discarding stale settings for organization %s", organization_id)
                return
            if writes != self._writes.get(key, 0):
                logger.debug("Setting %r was updated during reload", key)
                continue
            self._values[key].next(value)
