# portal/schemas/auth.py
from pydantic import EmailStr, ConfigDict, model_validator
from sqlmodel import SQLModel, Field

from portal.models.session import SessionTokens
from portal.models.user import UserProfile


class LoginRequest(SQLModel):
    """Sign-in form payload."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)


class LoginResponse(SQLModel):
    """Returned after a successful sign-in, once the profile has settled."""

    user: UserProfile | None
    app_name: str


class PasswordResetRequest(SQLModel):
    """Request a password reset e-mail."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr


class PasswordUpdate(SQLModel):
    """
    Set a new password (reset-password page).

    access_token / refresh_token are the pair carried by a recovery or
    invitation link; when given, that session is adopted first.
    """

    model_config = ConfigDict(extra="forbid")

    password: str = Field(min_length=8)
    confirm_password: str
    access_token: str | None = None
    refresh_token: str | None = None

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordUpdate":
        if self.password != self.confirm_password:
            raise ValueError("passwords do not match")
        if (self.access_token is None) != (self.refresh_token is None):
            raise ValueError("access_token and refresh_token must be sent together")
        return self

    def link_tokens(self) -> SessionTokens | None:
        if self.access_token is None or self.refresh_token is None:
            return None
        return SessionTokens(
            access_token=self.access_token,
            refresh_token=self.refresh_token,
        )


class SessionRead(SQLModel):
    """Public view of the session state (tokens are never returned)."""

    status: str
    email: str | None = None
    user: UserProfile | None = None
