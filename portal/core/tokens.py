# portal/core/tokens.py
from typing import Any

from jose import jwt, JWTError

from portal.core.errors import AuthError


def read_access_token_claims(
    token: str,
    secret: str | None = None,
    algorithm: str = "HS256",
) -> dict[str, Any]:
    """
    Read the claims of a Supabase access token (JWT).

    Verification:
      - signature (only when a JWT secret is configured)
      - expiration is NOT verified here; an expired access token can
        still be exchanged through its refresh token
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        AuthError: if the token is malformed or the signature is wrong.
    """
    try:
        if secret:
            return jwt.decode(
                token,
                secret,
                algorithms=[algorithm],
                options={"verify_aud": False, "verify_exp": False},
            )
        return jwt.get_unverified_claims(token)
    except JWTError as exc:
        raise AuthError("Invalid access token") from exc


def check_token_subject(
    token: str,
    subject_id: str,
    secret: str | None = None,
    algorithm: str = "HS256",
) -> None:
    """
    Ensure a persisted access token belongs to the persisted subject.

    Raises:
        AuthError: if the token is invalid or its 'sub' does not match.
    """
    claims = read_access_token_claims(token, secret=secret, algorithm=algorithm)
    if claims.get("sub") != subject_id:
        raise AuthError("Token subject does not match stored session")
