from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from .dtos import MembershipInfo, RoleInfo


class IMembershipReader(ABC):
    """Read port for memberships - the engine's only view of the membership store"""

    @abstractmethod
    async def find_membership(
        self, tenant_id: UUID, user_id: UUID
    ) -> Optional[MembershipInfo]:
        """Get the membership of a user in a tenant, whatever its status"""
        pass


class IRoleReader(ABC):
    """Read port for roles - returns a role with its resolved grants"""

    @abstractmethod
    async def find_role(self, role_id: UUID) -> Optional[RoleInfo]:
        """Get a role and its permission grants by ID"""
        pass
