from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from uuid import UUID

from src.domain.entities import PermissionScope, Role, RolePermission


class IRoleRepository(ABC):
    """Role repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, role_id: UUID) -> Optional[Role]:
        """Get role with its permission grants by ID"""
        pass

    @abstractmethod
    async def get_visible(self, role_id: UUID, tenant_id: UUID) -> Optional[Role]:
        """Get a role owned by the tenant or a system role"""
        pass

    @abstractmethod
    async def get_visible_many(self, role_ids: List[UUID], tenant_id: UUID) -> List[Role]:
        """Get the roles among role_ids visible to the tenant"""
        pass

    @abstractmethod
    async def get_by_key(self, tenant_id: Optional[UUID], key: str) -> Optional[Role]:
        """Get role by key; tenant_id None looks up a system role"""
        pass

    @abstractmethod
    async def list_for_tenant(self, tenant_id: UUID) -> List[Role]:
        """System roles first, then tenant roles, each ordered by name"""
        pass

    @abstractmethod
    async def create(self, role: Role) -> Role:
        """Create a new role"""
        pass

    @abstractmethod
    async def update(self, role: Role) -> Role:
        """Update existing role"""
        pass

    @abstractmethod
    async def delete(self, role: Role) -> None:
        """Delete a role and its grants"""
        pass

    @abstractmethod
    async def get_grant(self, role_id: UUID, permission_id: UUID) -> Optional[RolePermission]:
        """Get the grant of a permission to a role"""
        pass

    @abstractmethod
    async def save_grant(self, grant: RolePermission) -> RolePermission:
        """Create or update a single grant"""
        pass

    @abstractmethod
    async def replace_grants(
        self,
        role: Role,
        grants: List[Tuple[UUID, Optional[PermissionScope]]],
    ) -> Role:
        """Replace all grants of a role with (permission_id, scope) pairs"""
        pass
