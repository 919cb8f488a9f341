# portal/repositories/auth_repo.py
import logging
import uuid
from typing import Any, Callable

from supabase import AsyncClient

from portal.core.errors import AuthError
from portal.models.session import ProviderEvent, SessionState, SessionTokens
from portal.repositories._utils import remote_call

logger = logging.getLogger(__name__)

# Supabase AuthChangeEvent -> portal vocabulary. Events not listed here
# (INITIAL_SESSION, MFA_CHALLENGE_VERIFIED, USER_DELETED) are ignored.
_PROVIDER_EVENTS: dict[str, ProviderEvent] = {
    "SIGNED_IN": ProviderEvent.SIGNED_IN,
    "SIGNED_OUT": ProviderEvent.SIGNED_OUT,
    "TOKEN_REFRESHED": ProviderEvent.TOKEN_REFRESHED,
    "PASSWORD_RECOVERY": ProviderEvent.PASSWORD_RECOVERY,
    "USER_UPDATED": ProviderEvent.USER_UPDATED,
}

ProviderListener = Callable[[ProviderEvent, SessionState | None], None]


def session_to_state(session: Any) -> SessionState | None:
    """Map a supabase_auth Session to an AUTHENTICATED SessionState."""
    if session is None or session.user is None:
        return None
    return SessionState.authenticated(
        subject_id=session.user.id,
        email=session.user.email,
        tokens=SessionTokens(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
        ),
    )


class AuthRepository:
    """
    Session-bearing Supabase Auth calls.

    Responsibilities:
      - call supabase.auth on behalf of the operator
      - translate provider sessions/events into SessionState/ProviderEvent
      - no state of its own (the Session Store owns the identity)
    """

    def __init__(self, client: AsyncClient):
        self.client = client

    async def authenticate(self, email: str, password: str) -> SessionState:
        """
        Raises:
            AuthError: bad credentials, unconfirmed account.
            TransientRemoteError: network/server failure.
        """
        with remote_call("sign in"):
            response = await self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        state = session_to_state(response.session)
        if state is None:
            raise AuthError("Sign-in did not return a session")
        return state

    async def sign_up(
        self,
        email: str,
        password: str,
        redirect_to: str | None = None,
    ) -> tuple[uuid.UUID, SessionState | None]:
        """
        Create an auth user.

        Returns:
            (user id, session state if the provider signed the user in)
        """
        credentials: dict[str, Any] = {"email": email, "password": password}
        if redirect_to:
            credentials["options"] = {"email_redirect_to": redirect_to}

        with remote_call("sign up"):
            response = await self.client.auth.sign_up(credentials)

        if response.user is None:
            raise AuthError("Failed to create user")
        return uuid.UUID(str(response.user.id)), session_to_state(response.session)

    async def sign_out(self) -> None:
        with remote_call("sign out"):
            await self.client.auth.sign_out()

    async def get_session(self) -> SessionState | None:
        with remote_call("get session"):
            session = await self.client.auth.get_session()
        return session_to_state(session)

    async def set_session(self, tokens: SessionTokens) -> SessionState:
        """
        Hand a token pair to the provider; it refreshes the pair if the
        access token has expired.

        Raises:
            AuthError: if the pair is rejected.
        """
        with remote_call("set session"):
            response = await self.client.auth.set_session(
                tokens.access_token, tokens.refresh_token
            )
        state = session_to_state(response.session)
        if state is None:
            raise AuthError("Session could not be restored")
        return state

    async def send_password_reset(self, email: str, redirect_to: str) -> None:
        with remote_call("password reset"):
            await self.client.auth.reset_password_for_email(
                email, {"redirect_to": redirect_to}
            )

    async def update_password(self, new_password: str) -> None:
        with remote_call("update password"):
            await self.client.auth.update_user({"password": new_password})

    def on_event(self, listener: ProviderListener) -> Callable[[], None]:
        """
        Subscribe to provider auth events.

        Returns:
            A callable that removes the subscription.
        """

        def callback(event: str, session: Any) -> None:
            mapped = _PROVIDER_EVENTS.get(str(event))
            if mapped is None:
                logger.debug("Ignoring auth event %s", event)
                return
            listener(mapped, session_to_state(session))

        subscription = self.client.auth.on_auth_state_change(callback)
        return subscription.unsubscribe


class AuthAdminRepository:
    """
    Auth admin API (service role key). Creating users must not touch the
    operator's own session, hence the separate client.
    """

    def __init__(self, client: AsyncClient | None):
        self.client = client

    def _admin(self):
        if self.client is None:
            raise RuntimeError("Missing SUPABASE_SERVICE_ROLE_KEY in .env")
        return self.client.auth.admin

    async def create_user(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any],
    ) -> uuid.UUID:
        admin = self._admin()
        with remote_call("create user"):
            response = await admin.create_user(
                {
                    "email": email,
                    "password": password,
                    "email_confirm": True,
                    "user_metadata": metadata,
                }
            )
        return uuid.UUID(str(response.user.id))

    async def invite_user(
        self,
        email: str,
        metadata: dict[str, Any],
        redirect_to: str,
    ) -> uuid.UUID:
        admin = self._admin()
        with remote_call("invite user"):
            response = await admin.invite_user_by_email(
                email, {"data": metadata, "redirect_to": redirect_to}
            )
        return uuid.UUID(str(response.user.id))
