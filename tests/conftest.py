"""Shared fixtures for portal tests.

Settings are read from the environment; the defaults below let the app
import without a real Supabase project. Nothing here talks to Supabase:
repositories are replaced by mocks.
"""

import os
import uuid
from datetime import datetime, timezone

import pytest
from jose import jwt

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

from portal.core.observable import ValueStream  # noqa: E402
from portal.models.session import SessionState, SessionTokens  # noqa: E402
from portal.models.user import UserProfile, UserRole  # noqa: E402

ACME_ORG_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
OTHER_ORG_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
TEST_JWT_SECRET = "test-jwt-secret"


def make_profile(
    role: UserRole = UserRole.USER,
    organization_id: uuid.UUID | None = ACME_ORG_ID,
    email: str = "ops@example.com",
    user_id: uuid.UUID | None = None,
) -> UserProfile:
    now = datetime.now(timezone.utc)
    return UserProfile(
        id=user_id or uuid.uuid4(),
        email=email,
        first_name="Ada",
        last_name="Lovelace",
        role=role,
        organization_id=organization_id,
        created_at=now,
        updated_at=now,
    )


def make_access_token(subject: uuid.UUID | str, secret: str = TEST_JWT_SECRET) -> str:
    return jwt.encode({"sub": str(subject), "role": "authenticated"}, secret, algorithm="HS256")


def make_session_state(subject: uuid.UUID | None = None, email: str = "ops@example.com") -> SessionState:
    subject = subject or uuid.uuid4()
    return SessionState.authenticated(
        subject_id=subject,
        email=email,
        tokens=SessionTokens(
            access_token=make_access_token(subject),
            refresh_token=f"refresh-{subject}",
            expires_at=1_900_000_000,
        ),
    )


class StubProfiles:
    """Stands in for ProfileResolver where only current_user is read."""

    def __init__(self, user: UserProfile | None = None):
        self._current = ValueStream(user)
        self.current_user = self._current.as_observable()

    def set_user(self, user: UserProfile | None) -> None:
        self._current.next(user)


@pytest.fixture
def super_admin() -> UserProfile:
    return make_profile(role=UserRole.SUPER_ADMIN, organization_id=None, email="root@example.com")


@pytest.fixture
def org_admin() -> UserProfile:
    return make_profile(role=UserRole.ORG_ADMIN, email="admin@acme.example.com")


@pytest.fixture
def member() -> UserProfile:
    return make_profile(role=UserRole.USER, email="member@acme.example.com")
