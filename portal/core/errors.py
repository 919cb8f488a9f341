# portal/core/errors.py
"""
Error taxonomy for the portal.

Propagation policy:
  - StorageError and NotFoundError are absorbed where they occur and turned
    into a safe default (no session, no profile, fallback setting value).
  - AuthError and AuthorizationError reach the immediate caller (usually a
    route handler) and are shown to the operator. Never retried.
  - TransientRemoteError fails open on the super-admin existence check and
    propagates like AuthError everywhere else.
"""


class PortalError(Exception):
    """Base class for all portal errors."""

    code = "PORTAL_ERROR"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class AuthError(PortalError):
    """Bad credentials, unconfirmed account, invalid or expired tokens."""

    code = "AUTH_ERROR"


class NotFoundError(PortalError):
    """A profile, setting or other row does not exist."""

    code = "NOT_FOUND"


class AuthorizationError(PortalError):
    """The current user's role does not allow the requested write."""

    code = "FORBIDDEN"


class StorageError(PortalError):
    """Token persistence I/O failure."""

    code = "STORAGE_ERROR"


class TransientRemoteError(PortalError):
    """Network or server failure on a remote call."""

    code = "REMOTE_ERROR"


class ConflictError(PortalError):
    """A unique constraint rejected the write (e.g. duplicate shortname)."""

    code = "CONFLICT"
