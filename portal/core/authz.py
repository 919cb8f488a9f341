# portal/core/authz.py
"""
Authorization policy for portal routes.

Pure, synchronous predicates over a snapshot of the current user. They
never navigate or raise; route guards in portal.core.auth turn the
decision into a redirect.

  - can_access: authenticated, and holding required_role when one is given
  - can_access_super_admin: super_admin only. A None user is
    DENY_FORBIDDEN (not DENY_UNAUTHENTICATED); compose after can_access
    when the sign-in redirect is wanted.
  - can_manage_organization: super_admin, or org_admin of that organization
  - setup_access: bootstrap is open only while no super_admin exists
"""

import uuid
from enum import Enum

from portal.models.user import UserProfile, UserRole


class AccessDecision(str, Enum):
    ALLOW = "allow"
    DENY_UNAUTHENTICATED = "deny_unauthenticated"
    DENY_FORBIDDEN = "deny_forbidden"
    # Setup flow is closed because a super admin already exists.
    SETUP_COMPLETE = "setup_complete"


def can_access(
    user: UserProfile | None,
    required_role: UserRole | None = None,
) -> AccessDecision:
    if user is None:
        return AccessDecision.DENY_UNAUTHENTICATED
    if required_role is not None and user.role != required_role:
        return AccessDecision.DENY_FORBIDDEN
    return AccessDecision.ALLOW


def can_access_super_admin(user: UserProfile | None) -> AccessDecision:
    if user is not None and user.role == UserRole.SUPER_ADMIN:
        return AccessDecision.ALLOW
    return AccessDecision.DENY_FORBIDDEN


def can_manage_organization(
    user: UserProfile | None,
    organization_id: uuid.UUID,
) -> AccessDecision:
    if user is None:
        return AccessDecision.DENY_UNAUTHENTICATED
    if user.role == UserRole.SUPER_ADMIN:
        return AccessDecision.ALLOW
    if user.role == UserRole.ORG_ADMIN and user.organization_id == organization_id:
        return AccessDecision.ALLOW
    return AccessDecision.DENY_FORBIDDEN


def setup_access(super_admin_exists: bool) -> AccessDecision:
    if super_admin_exists:
        return AccessDecision.SETUP_COMPLETE
    return AccessDecision.ALLOW
