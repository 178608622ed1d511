"""
Create Role Use Case

Creates a custom role owned by a tenant.
"""

import logging
from typing import List, Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, AuditEventTypes, Role, RolePermission
from src.domain.errors import DomainError

from .assign_permissions_use_case import validate_grants
from .dtos import PermissionGrantInput, RoleResponse

logger = logging.getLogger(__name__)


class CreateRoleUseCase:
    """
    Use case for creating a tenant-owned custom role.

    Business Rules:
    - Role key must be unique within the tenant
    - Custom roles are editable and never system defaults
    - Optional initial grants are validated like AssignPermissions
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        actor_user_id: UUID,
        tenant_id: UUID,
        name: str,
        key: str,
        description: Optional[str] = None,
        permissions: Optional[List[PermissionGrantInput]] = None,
    ) -> RoleResponse:
        async with self.uow:
            existing = await self.uow.roles.get_by_key(tenant_id, key)
            if existing is not None:
                raise DomainError(
                    "ROLE_KEY_EXISTS", f"Role with key '{key}' already exists for this tenant"
                )

            grants = await validate_grants(self.uow, permissions or [])

            role = Role(
                tenant_id=tenant_id,
                name=name,
                key=key,
                description=description,
                is_system_default=False,
                is_editable=True,
            )
            role.permissions = [
                RolePermission(
                    role_id=role.id, permission_id=permission_id, tenant_id=tenant_id, scope=scope
                )
                for permission_id, scope in grants
            ]
            role = await self.uow.roles.create(role)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=actor_user_id,
                    action=AuditEventTypes.ROLE_CREATED,
                    resource_type="role",
                    resource_id=str(role.id),
                    event_metadata={"name": name, "key": key, "permission_count": len(grants)},
                )
            )
            response = RoleResponse.from_role(role)
            await self.uow.commit()

        logger.info(f"Role created: role={response.id} tenant={tenant_id} key={key}")
        return response
