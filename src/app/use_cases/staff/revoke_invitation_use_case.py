"""
Revoke Invitation Use Case
"""

import logging
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, AuditEventTypes, InvitationStatus
from src.domain.errors import DomainError

from .dtos import RevokeInvitationResponse

logger = logging.getLogger(__name__)


class RevokeInvitationUseCase:
    """
    Use case for revoking a pending invitation.

    Business Rules:
    - Invitation must belong to the tenant
    - Only PENDING invitations can be revoked
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor_user_id: UUID, tenant_id: UUID, invitation_id: UUID
    ) -> RevokeInvitationResponse:
        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(invitation_id)
            if invitation is None or invitation.tenant_id != tenant_id:
                raise DomainError("INVITATION_NOT_FOUND", f"Invitation not found: {invitation_id}")

            if invitation.status != InvitationStatus.PENDING:
                raise DomainError(
                    "INVITATION_NOT_PENDING",
                    f"Invitation status is {invitation.status.value}, expected PENDING",
                )

            invitation.status = InvitationStatus.REVOKED
            await self.uow.invitations.update(invitation)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=actor_user_id,
                    action=AuditEventTypes.INVITATION_REVOKED,
                    resource_type="invitation",
                    resource_id=str(invitation_id),
                    event_metadata={"email": invitation.email},
                )
            )
            await self.uow.commit()

        logger.info(f"Invitation revoked: invitation={invitation_id} tenant={tenant_id}")
        return RevokeInvitationResponse(status="revoked")
