"""
Access Control Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    UserStatus,
    LegacyUserRole,
    TenantStatus,
    MembershipStatus,
    PermissionScope,
    InvitationStatus,
)

# Export all entities
from .user import User
from .tenant import Tenant
from .permission import Permission, permission_key
from .role import Role, RolePermission
from .membership import Membership
from .invitation import Invitation
from .audit_event import AuditEvent, AuditEventTypes

__all__ = [
    # Enums
    "UserStatus",
    "LegacyUserRole",
    "TenantStatus",
    "MembershipStatus",
    "PermissionScope",
    "InvitationStatus",
    # Entities
    "User",
    "Tenant",
    "Permission",
    "Role",
    "RolePermission",
    "Membership",
    "Invitation",
    "AuditEvent",
    "AuditEventTypes",
    "permission_key",
]
