"""
Access Control Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserStatus(str, Enum):
    """User account status"""

    ACTIVE = "ACTIVE"
    DISABLED = "DISABLED"


class LegacyUserRole(str, Enum):
    """Single per-user role predating memberships (bootstrap/backfill only)"""

    SYSTEM_ADMIN = "SYSTEM_ADMIN"
    ADMIN = "ADMIN"
    HR_MANAGER = "HR_MANAGER"
    DEPARTMENT_HEAD = "DEPARTMENT_HEAD"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"
    REVIEWER = "REVIEWER"


class TenantStatus(str, Enum):
    """Tenant status"""

    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"


class MembershipStatus(str, Enum):
    """Membership lifecycle status. LEFT is terminal."""

    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    LEFT = "LEFT"


class PermissionScope(str, Enum):
    """Breadth of a permission grant"""

    SELF = "SELF"
    TEAM = "TEAM"
    ORG = "ORG"


class InvitationStatus(str, Enum):
    """Invitation status"""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"
