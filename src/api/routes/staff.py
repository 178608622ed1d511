"""
Staff API Routes

Invitations, onboarding and membership management.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, EmailStr, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.api.utils.authorization import authorize, authorize_any
from src.app.services.access_control import AccessControlService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.staff import (
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
    GetStaffMemberUseCase,
    InvitationResponse,
    InviteStaffResponse,
    InviteStaffUseCase,
    ListInvitationsUseCase,
    ListStaffUseCase,
    MarkStaffLeftUseCase,
    ReactivateStaffUseCase,
    RevokeInvitationResponse,
    RevokeInvitationUseCase,
    StaffListResponse,
    StaffMemberResponse,
    SuspendStaffUseCase,
    UpdateMembershipUseCase,
)
from src.depends import get_access_control, get_unit_of_work
from src.domain.entities import MembershipStatus
from src.domain.errors import DomainError

router = APIRouter(prefix="/staff", tags=["Staff"])

NOT_FOUND_CODES = ("TENANT_NOT_FOUND", "MEMBERSHIP_NOT_FOUND", "INVITATION_NOT_FOUND")
CONFLICT_CODES = (
    "ALREADY_MEMBER",
    "INVITE_ALREADY_EXISTS",
    "INVITATION_ALREADY_ACCEPTED",
    "INVITATION_NOT_PENDING",
    "MEMBERSHIP_LEFT",
)
BAD_REQUEST_CODES = (
    "ROLES_REQUIRED",
    "ROLE_NOT_FOUND",
    "DUPLICATE_ROLE",
    "PASSWORD_REQUIRED",
    "INVALID_PASSWORD",
    "INVALID_TOKEN",
    "EMAIL_MISMATCH",
)


def _raise_http(error: DomainError):
    if error.code in NOT_FOUND_CODES:
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    if error.code in CONFLICT_CODES:
        raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
    if error.code == "INVITATION_EXPIRED":
        raise ClientError(error, status_code=status.HTTP_410_GONE)
    if error.code in BAD_REQUEST_CODES:
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    raise ServerError(error)


class InviteStaffRequest(BaseModel):
    """Invite staff HTTP request payload"""

    email: EmailStr = Field(..., description="Email address to invite")
    role_ids: List[UUID] = Field(..., description="Role IDs, primary first")
    expires_in_days: int = Field(ApplicationConfig.INVITATION_TTL_DAYS, ge=1, le=90)
    metadata: Dict[str, Any] = Field(
        default_factory=dict, description="department, team, managerId"
    )


class AcceptInvitationRequest(BaseModel):
    """Accept invitation HTTP request payload (no authentication)"""

    token: str = Field(..., min_length=1)
    email: EmailStr
    password: Optional[str] = Field(None, description="Required for new users")
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


class UpdateMembershipRequest(BaseModel):
    """Update membership HTTP request payload; omitted fields are unchanged"""

    primary_role_id: Optional[UUID] = None
    additional_role_ids: Optional[List[UUID]] = None
    status: Optional[MembershipStatus] = None
    metadata: Optional[Dict[str, Any]] = None


@router.get("", status_code=status.HTTP_200_OK, response_model=StaffListResponse)
async def list_staff(
    current_user: dict = Depends(authorize("staff", "view")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    status_filter: Optional[MembershipStatus] = Query(None, alias="status"),
    role_id: Optional[UUID] = Query(None),
    department: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """List staff members, newest first"""
    return await ListStaffUseCase(uow).execute(
        tenant_id=UUID(current_user["tenant_id"]),
        status=status_filter,
        role_id=role_id,
        department=department,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/invitations",
    status_code=status.HTTP_200_OK,
    response_model=List[InvitationResponse],
)
async def list_invitations(
    current_user: dict = Depends(authorize_any([("staff", "invite"), ("staff", "manage")])),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Pending invitations of the caller's tenant"""
    return await ListInvitationsUseCase(uow).execute(UUID(current_user["tenant_id"]))


@router.post(
    "/invitations",
    status_code=status.HTTP_201_CREATED,
    response_model=InviteStaffResponse,
)
async def invite_staff(
    request: InviteStaffRequest,
    current_user: dict = Depends(authorize("staff", "invite")),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Invite someone to the caller's tenant.

    Raises:
        - 400 Bad Request: No roles, or a role not visible to the tenant
        - 403 Forbidden: Missing staff.invite
        - 409 Conflict: Already a member, or a pending invitation exists
    """
    try:
        return await InviteStaffUseCase(uow).execute(
            inviter_user_id=UUID(current_user["user_id"]),
            tenant_id=UUID(current_user["tenant_id"]),
            email=request.email,
            role_ids=request.role_ids,
            expires_in_days=request.expires_in_days,
            metadata=request.metadata,
        )
    except DomainError as error:
        _raise_http(error)


@router.post(
    "/invitations/accept",
    status_code=status.HTTP_201_CREATED,
    response_model=AcceptInvitationResponse,
)
async def accept_invitation(
    request: AcceptInvitationRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Accept an invitation. Public endpoint: the token is the credential.

    Raises:
        - 400 Bad Request: Bad token, email mismatch, missing/short password
        - 409 Conflict: Already accepted, revoked, or already a member
        - 410 Gone: Invitation expired
    """
    try:
        return await AcceptInvitationUseCase(uow).execute(
            token=request.token,
            email=request.email,
            password=request.password,
            first_name=request.first_name,
            last_name=request.last_name,
        )
    except DomainError as error:
        _raise_http(error)


@router.delete(
    "/invitations/{invitation_id}",
    status_code=status.HTTP_200_OK,
    response_model=RevokeInvitationResponse,
)
async def revoke_invitation(
    invitation_id: UUID,
    current_user: dict = Depends(authorize("staff", "invite")),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    try:
        return await RevokeInvitationUseCase(uow).execute(
            actor_user_id=UUID(current_user["user_id"]),
            tenant_id=UUID(current_user["tenant_id"]),
            invitation_id=invitation_id,
        )
    except DomainError as error:
        _raise_http(error)


@router.get(
    "/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=StaffMemberResponse,
)
async def get_staff_member(
    user_id: UUID,
    current_user: dict = Depends(authorize("staff", "view", target_user_param="user_id")),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    try:
        return await GetStaffMemberUseCase(uow).execute(
            UUID(current_user["tenant_id"]), user_id
        )
    except DomainError as error:
        _raise_http(error)


@router.patch(
    "/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=StaffMemberResponse,
)
async def update_membership(
    user_id: UUID,
    request: UpdateMembershipRequest,
    current_user: dict = Depends(authorize("staff", "manage", target_user_param="user_id")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    access_control: AccessControlService = Depends(get_access_control),
):
    """
    Update a member's roles, status or metadata.

    Changing roles additionally requires roles.assign.

    Raises:
        - 400 Bad Request: Role not visible to the tenant
        - 403 Forbidden: Missing staff.manage (or roles.assign for role changes)
        - 404 Not Found: User has no membership in the tenant
        - 409 Conflict: Member has LEFT
    """
    tenant_id = UUID(current_user["tenant_id"])
    actor_user_id = UUID(current_user["user_id"])

    if request.primary_role_id is not None or request.additional_role_ids is not None:
        decision = await access_control.check_permission(
            tenant_id, actor_user_id, "roles", "assign"
        )
        if not decision.allowed:
            raise ClientError(
                DomainError("PERMISSION_DENIED", decision.reason or "Access denied"),
                status_code=status.HTTP_403_FORBIDDEN,
            )

    try:
        return await UpdateMembershipUseCase(uow, access_control.cache).execute(
            actor_user_id=actor_user_id,
            tenant_id=tenant_id,
            user_id=user_id,
            primary_role_id=request.primary_role_id,
            additional_role_ids=request.additional_role_ids,
            status=request.status,
            metadata=request.metadata,
        )
    except DomainError as error:
        _raise_http(error)


@router.post(
    "/{user_id}/suspend",
    status_code=status.HTTP_200_OK,
    response_model=StaffMemberResponse,
)
async def suspend_staff(
    user_id: UUID,
    current_user: dict = Depends(authorize("staff", "deactivate", target_user_param="user_id")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    access_control: AccessControlService = Depends(get_access_control),
):
    try:
        return await SuspendStaffUseCase(uow, access_control.cache).execute(
            UUID(current_user["user_id"]), UUID(current_user["tenant_id"]), user_id
        )
    except DomainError as error:
        _raise_http(error)


@router.post(
    "/{user_id}/reactivate",
    status_code=status.HTTP_200_OK,
    response_model=StaffMemberResponse,
)
async def reactivate_staff(
    user_id: UUID,
    current_user: dict = Depends(authorize("staff", "deactivate", target_user_param="user_id")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    access_control: AccessControlService = Depends(get_access_control),
):
    try:
        return await ReactivateStaffUseCase(uow, access_control.cache).execute(
            UUID(current_user["user_id"]), UUID(current_user["tenant_id"]), user_id
        )
    except DomainError as error:
        _raise_http(error)


@router.post(
    "/{user_id}/leave",
    status_code=status.HTTP_200_OK,
    response_model=StaffMemberResponse,
)
async def mark_staff_left(
    user_id: UUID,
    current_user: dict = Depends(authorize("staff", "deactivate", target_user_param="user_id")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    access_control: AccessControlService = Depends(get_access_control),
):
    """Mark a member as LEFT. Terminal: the membership can no longer change."""
    try:
        return await MarkStaffLeftUseCase(uow, access_control.cache).execute(
            UUID(current_user["user_id"]), UUID(current_user["tenant_id"]), user_id
        )
    except DomainError as error:
        _raise_http(error)
