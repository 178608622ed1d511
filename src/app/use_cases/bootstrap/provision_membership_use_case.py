"""
Provision Membership Use Case

Creates the Membership a legacy single-tenant user implicitly had.
"""

import logging
from typing import Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.access_control_defaults import map_legacy_role_to_system_role
from src.domain.entities import AuditEvent, AuditEventTypes, Membership, MembershipStatus
from src.domain.errors import DomainError

from .dtos import ProvisionedMembershipResponse
from .seed_access_control_use_case import upsert_system_role

logger = logging.getLogger(__name__)


class ProvisionMembershipUseCase:
    """
    Use case for provisioning a legacy user's membership.

    Business Rules:
    - Users without a legacy tenant get nothing
    - The legacy role maps onto a system role (EMPLOYEE when unknown)
    - A concurrent provision for the same (tenant, user) is not an error:
      the existing membership is re-read and returned
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, tenant_id: Optional[UUID], legacy_role: Optional[str]
    ) -> Optional[ProvisionedMembershipResponse]:
        """
        Execute provision membership use case.

        Args:
            user_id: Legacy user
            tenant_id: The user's legacy tenant
            legacy_role: The user's legacy single role value

        Returns:
            ProvisionedMembershipResponse, or None when there is nothing to provision
        """
        if tenant_id is None:
            return None

        role_key = map_legacy_role_to_system_role(legacy_role)

        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                logger.warning(
                    f"Tenant missing while provisioning membership: tenant={tenant_id} user={user_id}"
                )
                return None

            existing = await self.uow.memberships.get_by_user_and_tenant(user_id, tenant_id)
            if existing is not None:
                return self._response(existing, role_key, created=False)

            role = await upsert_system_role(self.uow, role_key)

            try:
                membership = await self.uow.memberships.create(
                    Membership(
                        tenant_id=tenant_id,
                        user_id=user_id,
                        primary_role_id=role.id,
                        status=MembershipStatus.ACTIVE,
                    )
                )
            except DomainError as error:
                if error.code != "MEMBERSHIP_EXISTS":
                    raise
                await self.uow.rollback()
                existing = await self.uow.memberships.get_by_user_and_tenant(user_id, tenant_id)
                if existing is None:
                    raise
                return self._response(existing, role_key, created=False)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=user_id,
                    action=AuditEventTypes.MEMBERSHIP_PROVISIONED,
                    resource_type="membership",
                    resource_id=str(membership.id),
                    event_metadata={"legacy_role": legacy_role, "role_key": role_key},
                )
            )
            response = self._response(membership, role_key, created=True)
            await self.uow.commit()

        logger.info(
            f"Auto-provisioned tenant membership: tenant={tenant_id} user={user_id} role={role_key}"
        )
        return response

    @staticmethod
    def _response(
        membership: Membership, role_key: str, created: bool
    ) -> ProvisionedMembershipResponse:
        return ProvisionedMembershipResponse(
            membership_id=str(membership.id),
            tenant_id=str(membership.tenant_id),
            user_id=str(membership.user_id),
            primary_role_id=str(membership.primary_role_id),
            role_key=role_key,
            created=created,
        )
