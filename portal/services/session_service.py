# portal/services/session_service.py
import logging
import uuid

from pydantic import ValidationError

from portal.core.errors import AuthError, TransientRemoteError
from portal.core.observable import EventChannel, ValueStream
from portal.core.token_storage import FaultTolerantStorage, TokenStorage
from portal.core.tokens import check_token_subject
from portal.models.session import (
    ProviderEvent,
    SessionState,
    SessionStatus,
    SessionTokens,
)
from portal.repositories.auth_repo import AuthRepository

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "portal-auth-token"


class SessionStore:
    """
    Owner of the operator's identity.

    State machine:
      UNKNOWN --restore_session()--> AUTHENTICATED | ANONYMOUS
      ANONYMOUS --sign_in()/adopt()/provider signed_in--> AUTHENTICATED
      AUTHENTICATED --sign_out()/provider signed_out--> ANONYMOUS
      AUTHENTICATED --provider token_refreshed--> AUTHENTICATED (new tokens)

    Every transition is published on `state` synchronously, in order, and
    only when the state actually changes. Provider password_recovery and
    user_updated events do not change the state; they are published on
    `profile_refresh` instead.

    The store is the only writer of persisted tokens.
    """

    def __init__(
        self,
        auth: AuthRepository,
        storage: TokenStorage,
        storage_key: str = DEFAULT_STORAGE_KEY,
        jwt_secret: str | None = None,
        jwt_algorithm: str = "HS256",
    ):
        self.auth = auth
        self.storage = FaultTolerantStorage(storage)
        self.storage_key = storage_key
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm

        self._state: ValueStream[SessionState] = ValueStream(SessionState.unknown())
        self.state = self._state.as_observable()
        self.profile_refresh: EventChannel[ProviderEvent] = EventChannel()
        self._detach = None

    @property
    def current(self) -> SessionState:
        return self._state.value

    # ----- Provider events -----

    def attach(self) -> None:
        """Start consuming provider auth events."""
        if self._detach is None:
            self._detach = self.auth.on_event(self.handle_provider_event)

    def detach(self) -> None:
        if self._detach is not None:
            self._detach()
            self._detach = None

    def handle_provider_event(
        self,
        event: ProviderEvent,
        state: SessionState | None,
    ) -> None:
        logger.debug("Auth provider event: %s", event.value)

        if event in (ProviderEvent.SIGNED_IN, ProviderEvent.TOKEN_REFRESHED):
            if state is not None and state.is_authenticated:
                self._persist(state)
                self._transition(state)
        elif event == ProviderEvent.SIGNED_OUT:
            self._forget()
            self._transition(SessionState.anonymous())
        elif event in (ProviderEvent.PASSWORD_RECOVERY, ProviderEvent.USER_UPDATED):
            if state is not None and state.is_authenticated:
                self._persist(state)
            self.profile_refresh.publish(event)

    # ----- Operations -----

    async def sign_in(self, email: str, password: str) -> SessionState:
        """
        Raises:
            AuthError: bad credentials / unconfirmed account. The state is
                left (or becomes) ANONYMOUS unless another identity was
                already signed in.
            TransientRemoteError: network/server failure.
        """
        try:
            state = await self.auth.authenticate(email, password)
        except (AuthError, TransientRemoteError):
            if not self.current.is_authenticated:
                self._transition(SessionState.anonymous())
            raise

        self._persist(state)
        self._transition(state)
        logger.info("Signed in as %s", state.email)
        return state

    async def sign_up(
        self,
        email: str,
        password: str,
        redirect_to: str | None = None,
    ) -> uuid.UUID:
        """
        Create an auth user. If the provider signs the new user in right
        away (e-mail confirmation disabled), the store transitions too.
        """
        user_id, state = await self.auth.sign_up(email, password, redirect_to)
        if state is not None:
            self._persist(state)
            self._transition(state)
        return user_id

    async def sign_out(self) -> None:
        """Always ends ANONYMOUS with persisted tokens cleared; idempotent."""
        if self.current.is_authenticated:
            try:
                await self.auth.sign_out()
            except (AuthError, TransientRemoteError) as exc:
                logger.warning("Provider sign-out failed, clearing locally: %s", exc)

        self._forget()
        self._transition(SessionState.anonymous())

    async def adopt(self, tokens: SessionTokens) -> SessionState:
        """
        Switch to the session carried by a token pair (impersonation,
        recovery and invitation links).

        Raises:
            AuthError: if the provider rejects the pair.
        """
        state = await self.auth.set_session(tokens)
        self._persist(state)
        self._transition(state)
        return state

    async def restore_session(self) -> SessionState:
        """
        Called once at process start.

        Reads the persisted token pair, checks it locally, then lets the
        provider validate (and refresh) it. Missing, corrupt or rejected
        tokens, remote failures and unexpected errors all end ANONYMOUS;
        this never raises and never leaves the state UNKNOWN.
        """
        restored: SessionState | None = None
        try:
            persisted = self._load()
            if persisted is not None:
                check_token_subject(
                    persisted.tokens.access_token,
                    str(persisted.subject_id),
                    secret=self.jwt_secret,
                    algorithm=self.jwt_algorithm,
                )
                restored = await self.auth.set_session(persisted.tokens)
            else:
                restored = await self.auth.get_session()
        except (AuthError, TransientRemoteError) as exc:
            logger.warning("Could not restore session: %s", exc)
            self._forget()
            restored = None
        except Exception:
            logger.exception("Unexpected error while restoring session")
            self._forget()
            restored = None
        finally:
            if restored is not None and restored.is_authenticated:
                self._persist(restored)
                self._transition(restored)
            elif not self.current.is_terminal:
                self._transition(SessionState.anonymous())

        return self.current

    async def send_password_reset(self, email: str, redirect_to: str) -> None:
        await self.auth.send_password_reset(email, redirect_to)

    async def update_password(self, new_password: str) -> None:
        """
        Raises:
            AuthError: if nobody is signed in or the provider rejects it.
        """
        if not self.current.is_authenticated:
            raise AuthError("Sign in before changing the password")
        await self.auth.update_password(new_password)

    # ----- Internals -----

    def _transition(self, new_state: SessionState) -> None:
        if new_state == self._state.value:
            return
        logger.info(
            "Session %s -> %s",
            self._state.value.status.value,
            new_state.status.value,
        )
        self._state.next(new_state)

    def _load(self) -> SessionState | None:
        raw = self.storage.get_item(self.storage_key)
        if raw is None:
            return None
        try:
            state = SessionState.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding corrupt persisted session")
            return None
        if state.status != SessionStatus.AUTHENTICATED or state.tokens is None:
            return None
        return state

    def _persist(self, state: SessionState) -> None:
        self.storage.set_item(self.storage_key, state.model_dump_json())

    def _forget(self) -> None:
        self.storage.remove_item(self.storage_key)
