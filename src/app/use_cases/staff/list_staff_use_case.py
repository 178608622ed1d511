"""
Staff Query Use Cases

Read-only views over memberships and pending invitations.
"""

from typing import Dict, List, Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import InvitationStatus, Membership, MembershipStatus, Role
from src.domain.errors import DomainError

from .dtos import InvitationResponse, RoleSummary, StaffListResponse, StaffMemberResponse


def _role_summary(role: Optional[Role]) -> Optional[RoleSummary]:
    if role is None:
        return None
    return RoleSummary(id=str(role.id), key=role.key, name=role.name)


async def build_staff_members(
    uow: UnitOfWork, tenant_id: UUID, memberships: List[Membership]
) -> List[StaffMemberResponse]:
    """Join memberships with their users and roles (two queries, not one per member)"""
    users = await uow.users.get_by_ids([m.user_id for m in memberships])
    users_by_id = {user.id: user for user in users}

    role_ids = list({role_id for m in memberships for role_id in m.role_ids})
    roles = await uow.roles.get_visible_many(role_ids, tenant_id)
    roles_by_id: Dict[UUID, Role] = {role.id: role for role in roles}

    members = []
    for membership in memberships:
        user = users_by_id.get(membership.user_id)
        metadata = dict(membership.member_metadata or {})
        members.append(
            StaffMemberResponse(
                membership_id=str(membership.id),
                user_id=str(membership.user_id),
                email=user.email if user else "",
                first_name=user.first_name if user else None,
                last_name=user.last_name if user else None,
                status=membership.status,
                primary_role=_role_summary(roles_by_id.get(membership.primary_role_id)),
                additional_roles=[
                    _role_summary(roles_by_id[role_id])
                    for role_id in membership.role_ids[1:]
                    if role_id in roles_by_id
                ],
                department=metadata.get("department"),
                metadata=metadata,
                created_at=membership.created_at.isoformat(),
                updated_at=membership.updated_at.isoformat(),
            )
        )
    return members


class ListStaffUseCase:
    """
    Use case for listing a tenant's staff.

    Filters combine with AND; results are newest first.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        tenant_id: UUID,
        status: Optional[MembershipStatus] = None,
        role_id: Optional[UUID] = None,
        department: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> StaffListResponse:
        async with self.uow:
            memberships = await self.uow.memberships.get_by_tenant_id(
                tenant_id, status=status, role_id=role_id, department=department
            )
            total = len(memberships)
            page = memberships[offset : offset + limit]
            members = await build_staff_members(self.uow, tenant_id, page)

        return StaffListResponse(
            members=members,
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + len(members) < total,
        )


class ListInvitationsUseCase:
    """Pending invitations for a tenant, newest first"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID) -> List[InvitationResponse]:
        async with self.uow:
            invitations = await self.uow.invitations.get_by_tenant_id(
                tenant_id, status=InvitationStatus.PENDING
            )
            return [InvitationResponse.from_invitation(invitation) for invitation in invitations]


class GetStaffMemberUseCase:
    """A single member of the tenant, addressed by user"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID, user_id: UUID) -> StaffMemberResponse:
        async with self.uow:
            membership = await self.uow.memberships.get_by_user_and_tenant(user_id, tenant_id)
            if membership is None:
                raise DomainError(
                    "MEMBERSHIP_NOT_FOUND", f"No membership for user {user_id} in this tenant"
                )
            (member,) = await build_staff_members(self.uow, tenant_id, [membership])
            return member
