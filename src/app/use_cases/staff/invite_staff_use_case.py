"""
Invite Staff Use Case

Handles inviting people to join a tenant with one or more roles.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, AuditEventTypes, Invitation
from src.domain.errors import DomainError

from .dtos import InviteStaffResponse

logger = logging.getLogger(__name__)


async def validate_role_ids(uow: UnitOfWork, tenant_id: UUID, role_ids: List[UUID]) -> None:
    """Every role must exist, appear once, and be a system role or owned by the tenant"""
    if len(set(role_ids)) != len(role_ids):
        raise DomainError("DUPLICATE_ROLE", "A role can only be assigned once")

    roles = await uow.roles.get_visible_many(role_ids, tenant_id)
    if len(roles) != len(role_ids):
        raise DomainError("ROLE_NOT_FOUND", "One or more roles not found or not accessible")


class InviteStaffUseCase:
    """
    Use case for inviting staff to a tenant.

    Business Rules:
    - At least one role; the first becomes the primary role on acceptance
    - Roles must be system roles or owned by the tenant
    - Existing members cannot be invited
    - Only one pending invitation per (tenant, email)
    - Token is cryptographically secure and single-use
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        inviter_user_id: UUID,
        tenant_id: UUID,
        email: str,
        role_ids: List[UUID],
        expires_in_days: int = 7,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> InviteStaffResponse:
        """
        Execute invite staff use case.

        Args:
            inviter_user_id: User ID of the person sending the invite
            tenant_id: Target tenant ID
            email: Email address to invite
            role_ids: Ordered role IDs, primary first
            expires_in_days: Days until the invitation expires
            metadata: Membership metadata applied on acceptance (department, team, managerId)

        Returns:
            InviteStaffResponse DTO
        """
        email = email.strip().lower()

        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                raise DomainError("TENANT_NOT_FOUND", f"Tenant not found: {tenant_id}")

            if not role_ids:
                raise DomainError("ROLES_REQUIRED", "At least one role must be specified")

            await validate_role_ids(self.uow, tenant_id, role_ids)

            existing_user = await self.uow.users.get_by_email(email)
            if existing_user:
                existing_membership = await self.uow.memberships.get_by_user_and_tenant(
                    existing_user.id, tenant_id
                )
                if existing_membership:
                    raise DomainError(
                        "ALREADY_MEMBER", f"User with email {email} is already a member of this tenant"
                    )

            pending_invitation = await self.uow.invitations.get_pending_by_tenant_and_email(
                tenant_id, email
            )
            if pending_invitation:
                raise DomainError(
                    "INVITE_ALREADY_EXISTS", f"Pending invitation already exists for {email}"
                )

            invitation = Invitation(
                tenant_id=tenant_id,
                email=email,
                invited_by_user_id=inviter_user_id,
                role_ids=[str(role_id) for role_id in role_ids],
                invite_metadata=dict(metadata or {}),
                token=secrets.token_urlsafe(32),
                expires_at=datetime.utcnow() + timedelta(days=expires_in_days),
            )
            invitation = await self.uow.invitations.create(invitation)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=inviter_user_id,
                    action=AuditEventTypes.STAFF_INVITED,
                    resource_type="invitation",
                    resource_id=str(invitation.id),
                    event_metadata={
                        "email": email,
                        "role_ids": invitation.role_ids,
                        "expires_at": invitation.expires_at.isoformat(),
                    },
                )
            )

            response = InviteStaffResponse(
                invite_id=str(invitation.id),
                email=invitation.email,
                status=invitation.status,
                token=invitation.token,
                expires_at=invitation.expires_at.isoformat(),
            )
            await self.uow.commit()

        # TODO: hand the token to an email sender once one exists
        logger.info(f"Staff invited: invitation={response.invite_id} tenant={tenant_id}")
        return response
