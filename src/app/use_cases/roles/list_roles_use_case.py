"""
Role Query Use Cases

Read-only views over roles and the permission catalog.
"""

from typing import Dict, List
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import DomainError

from .dtos import PermissionCatalogResponse, PermissionResponse, RoleResponse


class ListRolesUseCase:
    """System roles plus the tenant's custom roles, system roles first"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID) -> List[RoleResponse]:
        async with self.uow:
            roles = await self.uow.roles.list_for_tenant(tenant_id)
            return [RoleResponse.from_role(role) for role in roles]


class GetRoleUseCase:
    """A single role visible to the tenant"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID, role_id: UUID) -> RoleResponse:
        async with self.uow:
            role = await self.uow.roles.get_visible(role_id, tenant_id)
            if role is None:
                raise DomainError("ROLE_NOT_FOUND", f"Role not found: {role_id}")
            return RoleResponse.from_role(role)


class ListPermissionsUseCase:
    """Permission catalog grouped by resource"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> PermissionCatalogResponse:
        async with self.uow:
            permissions = await self.uow.permissions.list_all()

            grouped: Dict[str, List[PermissionResponse]] = {}
            for permission in permissions:
                grouped.setdefault(permission.resource, []).append(
                    PermissionResponse(
                        id=str(permission.id),
                        key=permission.key,
                        action=permission.action,
                        description=permission.description,
                    )
                )
            return PermissionCatalogResponse(resources=grouped)
