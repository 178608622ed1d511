from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Permission


class IPermissionRepository(ABC):
    """Permission repository interface - application layer"""

    @abstractmethod
    async def get_by_key(self, key: str) -> Optional[Permission]:
        """Get permission by resource.action key"""
        pass

    @abstractmethod
    async def get_by_ids(self, permission_ids: List[UUID]) -> List[Permission]:
        """Get permissions by IDs (missing IDs are skipped)"""
        pass

    @abstractmethod
    async def list_all(self) -> List[Permission]:
        """All permissions ordered by resource, then action"""
        pass

    @abstractmethod
    async def save(self, permission: Permission) -> Permission:
        """Create or update a permission"""
        pass
