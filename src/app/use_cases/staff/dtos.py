"""
Staff Use Case DTOs (Data Transfer Objects)

All Command and Response classes for staff and invitation management.
Provides type safety and clear contracts between layers.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from src.domain.entities import Invitation, InvitationStatus, MembershipStatus


# ============================================================================
# Response DTOs
# ============================================================================


class InviteStaffResponse(BaseModel):
    """Response for invite staff use case"""

    invite_id: str
    email: str
    status: InvitationStatus
    token: str
    expires_at: str


class AcceptInvitationResponse(BaseModel):
    """Response for accept invitation use case"""

    access_token: str
    token_type: str = "bearer"
    user_id: str
    tenant_id: str
    membership_id: str
    is_new_user: bool


class RoleSummary(BaseModel):
    """Role reference in a staff member response"""

    id: str
    key: str
    name: str


class StaffMemberResponse(BaseModel):
    """Membership joined with its user and roles"""

    membership_id: str
    user_id: str
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    status: MembershipStatus
    primary_role: Optional[RoleSummary]
    additional_roles: List[RoleSummary]
    department: Optional[str]
    metadata: Dict[str, Any]
    created_at: str
    updated_at: str


class StaffListResponse(BaseModel):
    """Paginated staff members"""

    members: List[StaffMemberResponse]
    total: int
    limit: int
    offset: int
    has_more: bool


class InvitationResponse(BaseModel):
    """Invitation as listed to tenant administrators (token omitted)"""

    id: str
    email: str
    status: InvitationStatus
    role_ids: List[str]
    invited_by_user_id: Optional[str]
    expires_at: str
    created_at: str

    @classmethod
    def from_invitation(cls, invitation: Invitation) -> "InvitationResponse":
        return cls(
            id=str(invitation.id),
            email=invitation.email,
            status=invitation.status,
            role_ids=list(invitation.role_ids or []),
            invited_by_user_id=(
                str(invitation.invited_by_user_id) if invitation.invited_by_user_id else None
            ),
            expires_at=invitation.expires_at.isoformat(),
            created_at=invitation.created_at.isoformat(),
        )


class RevokeInvitationResponse(BaseModel):
    """Response for revoke invitation use case"""

    status: str
