"""
Delete Role Use Case

Deletes a custom role that no membership references.
"""

import logging
from typing import Optional
from uuid import UUID

from src.app.services.access_control import IAccessCache
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, AuditEventTypes
from src.domain.errors import DomainError

from .dtos import DeleteRoleResponse

logger = logging.getLogger(__name__)


class DeleteRoleUseCase:
    """
    Use case for deleting a custom role.

    Business Rules:
    - Only editable roles owned by the tenant can be deleted
    - A role referenced by any membership (primary or additional) cannot be deleted
    - Grants are deleted with the role
    """

    def __init__(self, uow: UnitOfWork, cache: Optional[IAccessCache] = None):
        self.uow = uow
        self.cache = cache

    async def execute(
        self, actor_user_id: UUID, tenant_id: UUID, role_id: UUID
    ) -> DeleteRoleResponse:
        async with self.uow:
            role = await self.uow.roles.get_visible(role_id, tenant_id)
            if role is None or role.tenant_id != tenant_id:
                raise DomainError("ROLE_NOT_FOUND", f"Role not found: {role_id}")

            if not role.is_editable:
                raise DomainError("ROLE_NOT_EDITABLE", f"Role '{role.name}' cannot be deleted")

            member_count = await self.uow.memberships.count_by_role(role_id)
            if member_count > 0:
                raise DomainError(
                    "ROLE_IN_USE",
                    f"Cannot delete role '{role.name}' - it is assigned to {member_count} member(s)",
                )

            name, key = role.name, role.key
            await self.uow.roles.delete(role)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=actor_user_id,
                    action=AuditEventTypes.ROLE_DELETED,
                    resource_type="role",
                    resource_id=str(role_id),
                    event_metadata={"name": name, "key": key},
                )
            )
            await self.uow.commit()

        if self.cache is not None:
            self.cache.invalidate_role(role_id)

        logger.info(f"Role deleted: role={role_id} tenant={tenant_id}")
        return DeleteRoleResponse(status="deleted")
