# portal/services/profile_service.py
import asyncio
import logging
import uuid

from portal.core.errors import NotFoundError, TransientRemoteError
from portal.core.observable import ValueStream
from portal.models.session import ProviderEvent, SessionState, SessionStatus
from portal.models.user import UserProfile
from portal.repositories.user_repo import UserRepository
from portal.services.session_service import SessionStore

logger = logging.getLogger(__name__)


class ProfileResolver:
    """
    Owner of the "current user".

    Follows the Session Store:
      - AUTHENTICATED(subject): one profile fetch for the subject; the
        result becomes the current user
      - ANONYMOUS: current user is None immediately, no fetch

    Every fetch carries a generation number. Only the result of the most
    recently issued fetch is published; results of superseded fetches are
    dropped, whatever order they complete in.

    Fetch failures are logged and leave the current user None. There is
    no automatic retry.
    """

    def __init__(self, repo: UserRepository, session: SessionStore):
        self.repo = repo
        self.session = session

        self._current: ValueStream[UserProfile | None] = ValueStream(None)
        self.current_user = self._current.as_observable()

        self._generation = 0
        self._subject: uuid.UUID | None = None
        self._tasks: set[asyncio.Task] = set()
        self._unsubscribe: list = []

    def attach(self) -> None:
        if self._unsubscribe:
            return
        self._unsubscribe = [
            self.session.state.subscribe(self._on_session),
            self.session.profile_refresh.subscribe(self._on_refresh_requested),
        ]

    def detach(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []

    @property
    def generation(self) -> int:
        return self._generation

    async def settle(self) -> UserProfile | None:
        """Wait until no fetch is in flight; return the current user."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        return self._current.value

    async def refresh(self) -> UserProfile | None:
        """Re-fetch the current subject's profile (manual reload)."""
        if self._subject is not None:
            self._request(self._subject)
        return await self.settle()

    # ----- Subscriptions -----

    def _on_session(self, state: SessionState) -> None:
        if state.status == SessionStatus.AUTHENTICATED:
            if state.subject_id == self._subject:
                # Token refresh for the same subject: nothing to fetch.
                return
            self._request(state.subject_id)
        elif state.status == SessionStatus.ANONYMOUS:
            self._generation += 1
            self._subject = None
            self._current.next(None)

    def _on_refresh_requested(self, event: ProviderEvent) -> None:
        if self._subject is not None:
            logger.info("Re-fetching profile after %s", event.value)
            self._request(self._subject)

    # ----- Fetching -----

    def _request(self, subject: uuid.UUID) -> None:
        self._generation += 1
        generation = self._generation
        self._subject = subject

        current = self._current.value
        if current is not None and current.id != subject:
            self._current.next(None)

        task = asyncio.get_running_loop().create_task(self._fetch(subject, generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _fetch(self, subject: uuid.UUID, generation: int) -> None:
        profile: UserProfile | None
        try:
            profile = await self.repo.get_by_id(subject)
        except NotFoundError:
            logger.warning("No profile row for subject %s", subject)
            profile = None
        except TransientRemoteError as exc:
            logger.error("Error loading user profile for %s: %s", subject, exc)
            profile = None

        if generation != self._generation:
            logger.debug("Discarding stale profile fetch for %s", subject)
            return
        self._current.next(profile)
