# portal/repositories/_utils.py
from contextlib import contextmanager
from typing import Any, Iterator

import httpx
from postgrest.exceptions import APIError
from supabase_auth.errors import AuthError as ProviderAuthError, AuthRetryableError
from supabase_functions.errors import FunctionsError

from portal.core.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    TransientRemoteError,
)

# PostgREST: ".single()" matched no rows
NO_ROWS_CODE = "PGRST116"
# Postgres: unique_violation
UNIQUE_VIOLATION_CODE = "23505"


@contextmanager
def remote_call(operation: str) -> Iterator[None]:
    """
    Translate Supabase client errors into the portal taxonomy.

        with remote_call("fetch profile"):
            response = await query.execute()
    """
    try:
        yield
    except APIError as exc:
        if exc.code == NO_ROWS_CODE:
            raise NotFoundError(f"{operation}: not found") from exc
        if exc.code == UNIQUE_VIOLATION_CODE:
            raise ConflictError(f"{operation}: {exc.message}") from exc
        raise TransientRemoteError(f"{operation} failed: {exc.message}") from exc
    except AuthRetryableError as exc:
        raise TransientRemoteError(f"{operation} failed: {exc.message}") from exc
    except ProviderAuthError as exc:
        raise AuthError(exc.message) from exc
    except FunctionsError as exc:
        raise TransientRemoteError(f"{operation} failed: {exc}") from exc
    except httpx.HTTPError as exc:
        raise TransientRemoteError(f"{operation} failed: {exc}") from exc


def single_row(response: Any, what: str) -> dict[str, Any]:
    """
    Return the row of a maybe_single() response.

    Depending on the postgrest version, an empty result is either a None
    response or a response whose data is None.

    Raises:
        NotFoundError: if no row came back.
    """
    data = getattr(response, "data", None) if response is not None else None
    if not data:
        raise NotFoundError(f"{what} not found")
    if isinstance(data, list):
        return data[0]
    return data
