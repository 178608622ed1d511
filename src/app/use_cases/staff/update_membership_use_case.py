"""
Update Membership Use Case

Changes a staff member's roles, status or metadata.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from src.app.services.access_control import IAccessCache
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, AuditEventTypes, MembershipStatus
from src.domain.errors import DomainError

from .dtos import StaffMemberResponse
from .invite_staff_use_case import validate_role_ids
from .list_staff_use_case import build_staff_members

logger = logging.getLogger(__name__)


def _audit_event_type(
    previous: MembershipStatus, status: Optional[MembershipStatus]
) -> str:
    if status is None or status == previous:
        return AuditEventTypes.STAFF_UPDATED
    if status == MembershipStatus.SUSPENDED:
        return AuditEventTypes.STAFF_SUSPENDED
    if status == MembershipStatus.LEFT:
        return AuditEventTypes.STAFF_LEFT
    return AuditEventTypes.STAFF_REACTIVATED


class UpdateMembershipUseCase:
    """
    Use case for updating a membership.

    Business Rules:
    - Membership must belong to the tenant
    - LEFT is terminal: a LEFT membership cannot be changed
    - New roles must be system roles or owned by the tenant
    - Metadata is merged; a None value removes the key
    - The membership's cache entry is dropped after commit
    """

    def __init__(self, uow: UnitOfWork, cache: Optional[IAccessCache] = None):
        self.uow = uow
        self.cache = cache

    async def execute(
        self,
        actor_user_id: UUID,
        tenant_id: UUID,
        user_id: UUID,
        primary_role_id: Optional[UUID] = None,
        additional_role_ids: Optional[List[UUID]] = None,
        status: Optional[MembershipStatus] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> StaffMemberResponse:
        async with self.uow:
            membership = await self.uow.memberships.get_by_user_and_tenant(user_id, tenant_id)
            if membership is None:
                raise DomainError(
                    "MEMBERSHIP_NOT_FOUND", f"No membership for user {user_id} in this tenant"
                )

            if membership.status == MembershipStatus.LEFT:
                raise DomainError("MEMBERSHIP_LEFT", "Member has left this tenant")

            if primary_role_id is not None or additional_role_ids is not None:
                new_primary = primary_role_id or membership.primary_role_id
                new_additional = (
                    additional_role_ids
                    if additional_role_ids is not None
                    else membership.role_ids[1:]
                )
                await validate_role_ids(self.uow, tenant_id, [new_primary] + list(new_additional))
                membership.primary_role_id = new_primary
                membership.additional_role_ids = [str(role_id) for role_id in new_additional]

            previous_status = membership.status
            if status is not None:
                membership.status = status

            if metadata:
                merged = dict(membership.member_metadata or {})
                for key, value in metadata.items():
                    if value is None:
                        merged.pop(key, None)
                    else:
                        merged[key] = value
                membership.member_metadata = merged

            membership.updated_at = datetime.utcnow()
            membership = await self.uow.memberships.update(membership)
            membership_id = membership.id

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=actor_user_id,
                    action=_audit_event_type(previous_status, status),
                    resource_type="membership",
                    resource_id=str(membership_id),
                    event_metadata={
                        "target_user_id": str(user_id),
                        "changes": {
                            "primary_role_id": str(primary_role_id) if primary_role_id else None,
                            "additional_role_ids": (
                                [str(role_id) for role_id in additional_role_ids]
                                if additional_role_ids is not None
                                else None
                            ),
                            "status": status.value if status else None,
                            "metadata": metadata,
                        },
                    },
                )
            )

            (member,) = await build_staff_members(self.uow, tenant_id, [membership])
            await self.uow.commit()

        if self.cache is not None:
            self.cache.invalidate_membership(tenant_id, user_id)

        logger.info(f"Membership updated: membership={membership_id} tenant={tenant_id}")
        return member


class SuspendStaffUseCase:
    """Suspend a member; suspended members fail every permission check"""

    def __init__(self, uow: UnitOfWork, cache: Optional[IAccessCache] = None):
        self.update = UpdateMembershipUseCase(uow, cache)

    async def execute(
        self, actor_user_id: UUID, tenant_id: UUID, user_id: UUID
    ) -> StaffMemberResponse:
        return await self.update.execute(
            actor_user_id, tenant_id, user_id, status=MembershipStatus.SUSPENDED
        )


class ReactivateStaffUseCase:
    """Restore a suspended member to ACTIVE"""

    def __init__(self, uow: UnitOfWork, cache: Optional[IAccessCache] = None):
        self.update = UpdateMembershipUseCase(uow, cache)

    async def execute(
        self, actor_user_id: UUID, tenant_id: UUID, user_id: UUID
    ) -> StaffMemberResponse:
        return await self.update.execute(
            actor_user_id, tenant_id, user_id, status=MembershipStatus.ACTIVE
        )


class MarkStaffLeftUseCase:
    """Record that a member left the tenant; the membership is kept for history"""

    def __init__(self, uow: UnitOfWork, cache: Optional[IAccessCache] = None):
        self.update = UpdateMembershipUseCase(uow, cache)

    async def execute(
        self, actor_user_id: UUID, tenant_id: UUID, user_id: UUID
    ) -> StaffMemberResponse:
        return await self.update.execute(
            actor_user_id, tenant_id, user_id, status=MembershipStatus.LEFT
        )
