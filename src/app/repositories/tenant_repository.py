from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Tenant


class ITenantRepository(ABC):
    """Tenant repository interface - tenants are the isolation boundary"""

    @abstractmethod
    async def get_by_id(self, tenant_id: UUID) -> Optional[Tenant]:
        pass

    @abstractmethod
    async def create(self, tenant: Tenant) -> Tenant:
        pass
