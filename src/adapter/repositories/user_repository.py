from typing import List, Optional
from uuid import UUID

from sqlalchemy import exists
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import IUserRepository
from src.domain.entities import LegacyUserRole, Membership, User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_ids(self, user_ids: List[UUID]) -> List[User]:
        """Get users by IDs"""
        if not user_ids:
            return []
        stmt = select(User).where(col(User.id).in_(user_ids))
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_legacy_without_membership(self) -> List[User]:
        """Users with a legacy tenant, not system admins, and no membership at all"""
        has_membership = exists().where(Membership.user_id == User.id)
        stmt = select(User).where(
            col(User.tenant_id).is_not(None),
            User.role != LegacyUserRole.SYSTEM_ADMIN,
            ~has_membership,
        )
        result = await self.session.exec(stmt)
        return list(result.all())
