"""
Assign Role Permissions Use Case

Replaces the permission grants of a custom role.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from src.app.services.access_control import IAccessCache
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, AuditEventTypes, PermissionScope
from src.domain.errors import DomainError

from .dtos import PermissionGrantInput, RoleResponse

logger = logging.getLogger(__name__)


async def validate_grants(
    uow: UnitOfWork, permissions: List[PermissionGrantInput]
) -> List[Tuple[UUID, Optional[PermissionScope]]]:
    """Check every permission exists and appears once; returns (permission_id, scope) pairs"""
    permission_ids = [grant.permission_id for grant in permissions]
    if len(set(permission_ids)) != len(permission_ids):
        raise DomainError("DUPLICATE_PERMISSION", "A permission can only be granted once per role")

    found = await uow.permissions.get_by_ids(permission_ids)
    if len(found) != len(permission_ids):
        raise DomainError("PERMISSION_NOT_FOUND", "One or more permissions not found")

    return [(grant.permission_id, grant.scope) for grant in permissions]


class AssignPermissionsUseCase:
    """
    Use case for replacing a role's permission grants.

    Business Rules:
    - Only editable roles owned by the tenant can be changed
    - Every permission must exist; each appears at most once
    - Grants are replaced, not merged
    - The role's cache entry is dropped after commit
    """

    def __init__(self, uow: UnitOfWork, cache: Optional[IAccessCache] = None):
        self.uow = uow
        self.cache = cache

    async def execute(
        self,
        actor_user_id: UUID,
        tenant_id: UUID,
        role_id: UUID,
        permissions: List[PermissionGrantInput],
    ) -> RoleResponse:
        async with self.uow:
            role = await self.uow.roles.get_visible(role_id, tenant_id)
            if role is None or role.tenant_id != tenant_id:
                raise DomainError("ROLE_NOT_FOUND", f"Role not found: {role_id}")

            if not role.is_editable:
                raise DomainError(
                    "ROLE_NOT_EDITABLE", f"Role '{role.name}' permissions cannot be modified"
                )

            grants = await validate_grants(self.uow, permissions)
            role = await self.uow.roles.replace_grants(role, grants)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=actor_user_id,
                    action=AuditEventTypes.ROLE_PERMISSIONS_UPDATED,
                    resource_type="role",
                    resource_id=str(role_id),
                    event_metadata={
                        "permission_count": len(grants),
                        "permission_ids": [str(permission_id) for permission_id, _ in grants],
                    },
                )
            )
            response = RoleResponse.from_role(role)
            await self.uow.commit()

        if self.cache is not None:
            self.cache.invalidate_role(role_id)

        logger.info(f"Role permissions updated: role={role_id} tenant={tenant_id} count={len(grants)}")
        return response
