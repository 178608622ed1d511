"""
Use Cases

Organized into domain folders:
- roles/: Role and permission management
- staff/: Invitations and membership lifecycle
- bootstrap/: Catalog seeding and legacy membership provisioning
- audit/: Audit logs

Import from subdirectories for better organization.
"""

from .audit import GetAuditEventsUseCase
from .bootstrap import (
    BackfillLegacyMembershipsUseCase,
    ProvisionMembershipUseCase,
    SeedAccessControlUseCase,
)
from .roles import (
    AssignPermissionsUseCase,
    CreateRoleUseCase,
    DeleteRoleUseCase,
    GetRoleUseCase,
    ListPermissionsUseCase,
    ListRolesUseCase,
    UpdateRoleUseCase,
)
from .staff import (
    AcceptInvitationUseCase,
    InviteStaffUseCase,
    ListInvitationsUseCase,
    GetStaffMemberUseCase,
    ListStaffUseCase,
    MarkStaffLeftUseCase,
    ReactivateStaffUseCase,
    RevokeInvitationUseCase,
    SuspendStaffUseCase,
    UpdateMembershipUseCase,
)

__all__ = [
    # Roles
    "ListRolesUseCase",
    "GetRoleUseCase",
    "ListPermissionsUseCase",
    "CreateRoleUseCase",
    "UpdateRoleUseCase",
    "AssignPermissionsUseCase",
    "DeleteRoleUseCase",
    # Staff
    "InviteStaffUseCase",
    "AcceptInvitationUseCase",
    "ListStaffUseCase",
    "GetStaffMemberUseCase",
    "ListInvitationsUseCase",
    "UpdateMembershipUseCase",
    "SuspendStaffUseCase",
    "ReactivateStaffUseCase",
    "MarkStaffLeftUseCase",
    "RevokeInvitationUseCase",
    # Bootstrap
    "SeedAccessControlUseCase",
    "ProvisionMembershipUseCase",
    "BackfillLegacyMembershipsUseCase",
    # Audit
    "GetAuditEventsUseCase",
]
