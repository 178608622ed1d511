"""
Update Role Use Case

Renames or re-describes a custom role.
"""

import logging
from typing import Optional
from uuid import UUID

from src.app.services.access_control import IAccessCache
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, AuditEventTypes
from src.domain.errors import DomainError

from .dtos import RoleResponse

logger = logging.getLogger(__name__)


class UpdateRoleUseCase:
    """
    Use case for updating a role's name and description.

    Business Rules:
    - Only roles owned by the tenant are reachable (system roles are not)
    - Non-editable roles are rejected
    """

    def __init__(self, uow: UnitOfWork, cache: Optional[IAccessCache] = None):
        self.uow = uow
        self.cache = cache

    async def execute(
        self,
        actor_user_id: UUID,
        tenant_id: UUID,
        role_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> RoleResponse:
        async with self.uow:
            role = await self.uow.roles.get_visible(role_id, tenant_id)
            if role is None or role.tenant_id != tenant_id:
                raise DomainError("ROLE_NOT_FOUND", f"Role not found: {role_id}")

            if not role.is_editable:
                raise DomainError("ROLE_NOT_EDITABLE", f"Role '{role.name}' is not editable")

            if name:
                role.name = name
            if description is not None:
                role.description = description
            role = await self.uow.roles.update(role)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=actor_user_id,
                    action=AuditEventTypes.ROLE_UPDATED,
                    resource_type="role",
                    resource_id=str(role_id),
                    event_metadata={"changes": {"name": name, "description": description}},
                )
            )
            response = RoleResponse.from_role(role)
            await self.uow.commit()

        # Role name is part of the cached snapshot
        if self.cache is not None:
            self.cache.invalidate_role(role_id)

        logger.info(f"Role updated: role={role_id} tenant={tenant_id}")
        return response
