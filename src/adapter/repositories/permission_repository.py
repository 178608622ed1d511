from typing import List, Optional
from uuid import UUID

from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.permission_repository import IPermissionRepository
from src.domain.entities import Permission


class PermissionRepository(IPermissionRepository):
    """Permission repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_key(self, key: str) -> Optional[Permission]:
        """Get permission by resource.action key"""
        stmt = select(Permission).where(Permission.key == key)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_ids(self, permission_ids: List[UUID]) -> List[Permission]:
        """Get permissions by IDs"""
        if not permission_ids:
            return []
        stmt = select(Permission).where(col(Permission.id).in_(permission_ids))
        result = await self.session.exec(stmt)
        return list(result.all())

    async def list_all(self) -> List[Permission]:
        """All permissions ordered by resource, then action"""
        stmt = select(Permission).order_by(col(Permission.resource), col(Permission.action))
        result = await self.session.exec(stmt)
        return list(result.all())

    async def save(self, permission: Permission) -> Permission:
        """Create or update a permission"""
        self.session.add(permission)
        await self.session.flush()
        await self.session.refresh(permission)
        return permission
