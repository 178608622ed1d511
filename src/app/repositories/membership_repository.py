from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Membership, MembershipStatus


class IMembershipRepository(ABC):
    """Membership repository interface - application layer"""

    @abstractmethod
    async def get_by_user_and_tenant(
        self, user_id: UUID, tenant_id: UUID
    ) -> Optional[Membership]:
        """Get membership by user and tenant"""
        pass

    @abstractmethod
    async def get_by_tenant_id(
        self,
        tenant_id: UUID,
        status: Optional[MembershipStatus] = None,
        role_id: Optional[UUID] = None,
        department: Optional[str] = None,
    ) -> List[Membership]:
        """Get memberships for a tenant, optionally filtered"""
        pass

    @abstractmethod
    async def count_by_role(self, role_id: UUID) -> int:
        """Count memberships referencing a role as primary or additional"""
        pass

    @abstractmethod
    async def create(self, membership: Membership) -> Membership:
        """Create a new membership (raises DomainError MEMBERSHIP_EXISTS on conflict)"""
        pass

    @abstractmethod
    async def update(self, membership: Membership) -> Membership:
        """Update existing membership"""
        pass
