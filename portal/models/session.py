# portal/models/session.py
import uuid
from enum import Enum

from sqlmodel import SQLModel


class SessionStatus(str, Enum):
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class ProviderEvent(str, Enum):
    """Auth provider events, in the portal's own vocabulary."""

    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    TOKEN_REFRESHED = "token_refreshed"
    PASSWORD_RECOVERY = "password_recovery"
    USER_UPDATED = "user_updated"


class SessionTokens(SQLModel):
    access_token: str
    refresh_token: str
    expires_at: int | None = None


class SessionState(SQLModel):
    """
    Identity held by the Session Store.

    UNKNOWN until restore_session() finishes, then AUTHENTICATED (with
    subject and tokens) or ANONYMOUS.
    """

    status: SessionStatus
    subject_id: uuid.UUID | None = None
    email: str | None = None
    tokens: SessionTokens | None = None

    @classmethod
    def unknown(cls) -> "SessionState":
        return cls(status=SessionStatus.UNKNOWN)

    @classmethod
    def anonymous(cls) -> "SessionState":
        return cls(status=SessionStatus.ANONYMOUS)

    @classmethod
    def authenticated(
        cls,
        subject_id: uuid.UUID | str,
        tokens: SessionTokens,
        email: str | None = None,
    ) -> "SessionState":
        return cls(
            status=SessionStatus.AUTHENTICATED,
            subject_id=subject_id,
            email=email,
            tokens=tokens,
        )

    @property
    def is_authenticated(self) -> bool:
        return self.status == SessionStatus.AUTHENTICATED

    @property
    def is_terminal(self) -> bool:
        return self.status != SessionStatus.UNKNOWN
