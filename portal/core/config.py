# portal/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized portal settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key)

    Optional:
      - SUPABASE_SERVICE_ROLE_KEY (only used for auth admin operations:
        creating and inviting users)
      - SUPABASE_JWT_SECRET (when set, persisted access tokens are
        signature-checked before a session is restored)
    """

    PROJECT_NAME: str = "Admin Portal"

    # Fallback for the "app_name" setting when neither an organization
    # nor a global entry exists.
    APP_NAME: str = "Admin Portal"

    # Supabase config
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # Service role key bypasses RLS (auth admin API only)
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    # Local token validation
    SUPABASE_JWT_SECRET: str | None = None
    SUPABASE_JWT_ALG: str = "HS256"

    # Token persistence
    SESSION_STORAGE_PATH: str = ".portal/session.json"
    SESSION_STORAGE_KEY: str = "portal-auth-token"

    # Links sent by e-mail (password reset, invitations) point here
    PUBLIC_BASE_URL: str = "http://localhost:8000"

    # Redirect targets used by the route guards
    LOGIN_PATH: str = "/login"
    UNAUTHORIZED_PATH: str = "/unauthorized"

    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://localhost:4200",
        "http://127.0.0.1:4200",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
