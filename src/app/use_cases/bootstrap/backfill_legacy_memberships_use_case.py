"""
Backfill Legacy Memberships Use Case
"""

import logging

from src.app.services.unit_of_work import UnitOfWork

from .dtos import BackfillResponse
from .provision_membership_use_case import ProvisionMembershipUseCase

logger = logging.getLogger(__name__)


class BackfillLegacyMembershipsUseCase:
    """
    Provision a membership for every legacy user that lacks one.

    System admins are skipped. Each user is provisioned in its own
    transaction, so one failure does not undo the others.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> BackfillResponse:
        async with self.uow:
            users = await self.uow.users.get_legacy_without_membership()
            # Plain values: rows expire once a provision rolls back
            candidates = [(user.id, user.tenant_id, user.role) for user in users]

        provision = ProvisionMembershipUseCase(self.uow)
        created = 0
        for user_id, tenant_id, role in candidates:
            result = await provision.execute(user_id, tenant_id, role.value if role else None)
            if result is not None and result.created:
                created += 1

        if created > 0:
            logger.info(f"Backfilled tenant memberships for legacy users: count={created}")

        return BackfillResponse(scanned=len(candidates), created=created)
