# portal/core/supabase_client.py
from supabase import acreate_client, AsyncClient
from supabase.lib.client_options import AsyncClientOptions

from portal.core.config import Settings


async def supabase_public(settings: Settings) -> AsyncClient:
    """
    Create an async Supabase client with the anon/public key.

    Use cases:
      - signing the operator in/out, refreshing tokens
      - table reads/writes on behalf of the signed-in operator
      - RPC and edge functions

    Note: This client still respects RLS. It does not persist the session
    itself (persist_session=False): the Session Store owns token storage.
    """
    return await acreate_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_KEY,
        options=AsyncClientOptions(
            persist_session=False,
            auto_refresh_token=True,
        ),
    )


async def supabase_admin(settings: Settings) -> AsyncClient | None:
    """
    Create an async Supabase client with the service role key.

    Use cases:
      - auth admin operations (create user, invite user by e-mail)

    WARNING:
      - Never expose the service role key to the browser.

    Returns:
        None if SUPABASE_SERVICE_ROLE_KEY is not set; admin operations
        then fail with RuntimeError when called.
    """
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        return None
    return await acreate_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_SERVICE_ROLE_KEY,
        options=AsyncClientOptions(
            persist_session=False,
            auto_refresh_token=False,
        ),
    )
