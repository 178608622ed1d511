"""
Staff Management Use Cases

Invitations, onboarding and membership lifecycle.
"""

from .accept_invitation_use_case import AcceptInvitationUseCase
from .dtos import (
    AcceptInvitationResponse,
    InvitationResponse,
    InviteStaffResponse,
    RevokeInvitationResponse,
    RoleSummary,
    StaffListResponse,
    StaffMemberResponse,
)
from .invite_staff_use_case import InviteStaffUseCase
from .list_staff_use_case import GetStaffMemberUseCase, ListInvitationsUseCase, ListStaffUseCase
from .revoke_invitation_use_case import RevokeInvitationUseCase
from .update_membership_use_case import (
    MarkStaffLeftUseCase,
    ReactivateStaffUseCase,
    SuspendStaffUseCase,
    UpdateMembershipUseCase,
)

__all__ = [
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
    "InviteStaffResponse",
    "AcceptInvitationResponse",
    "InvitationResponse",
    "RevokeInvitationResponse",
    "RoleSummary",
    "StaffListResponse",
    "StaffMemberResponse",
]
