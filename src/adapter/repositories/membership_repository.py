from typing import List, Optional
from uuid import UUID

from sqlalchemy import String, cast
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.membership_repository import IMembershipRepository
from src.domain.entities import Membership, MembershipStatus
from src.domain.errors import DomainError


class MembershipRepository(IMembershipRepository):
    """Membership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_and_tenant(
        self, user_id: UUID, tenant_id: UUID
    ) -> Optional[Membership]:
        """Get membership by user and tenant"""
        stmt = select(Membership).where(
            Membership.user_id == user_id, Membership.tenant_id == tenant_id
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_tenant_id(
        self,
        tenant_id: UUID,
        status: Optional[MembershipStatus] = None,
        role_id: Optional[UUID] = None,
        department: Optional[str] = None,
    ) -> List[Membership]:
        """Get memberships for a tenant, newest first"""
        stmt = select(Membership).where(Membership.tenant_id == tenant_id)
        if status is not None:
            stmt = stmt.where(Membership.status == status)
        stmt = stmt.order_by(col(Membership.created_at).desc())
        result = await self.session.exec(stmt)
        memberships = list(result.all())

        # JSON columns are filtered here to stay portable across databases
        if role_id is not None:
            memberships = [m for m in memberships if m.references_role(role_id)]
        if department is not None:
            memberships = [
                m for m in memberships if (m.member_metadata or {}).get("department") == department
            ]
        return memberships

    async def count_by_role(self, role_id: UUID) -> int:
        """Count memberships referencing a role as primary or additional"""
        stmt = select(Membership).where(
            (Membership.primary_role_id == role_id)
            | cast(col(Membership.additional_role_ids), String).contains(str(role_id))
        )
        result = await self.session.exec(stmt)
        return sum(1 for m in result.all() if m.references_role(role_id))

    async def create(self, membership: Membership) -> Membership:
        """Create a new membership"""
        self.session.add(membership)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise DomainError(
                "MEMBERSHIP_EXISTS", "User already has a membership in this tenant"
            ) from exc
        await self.session.refresh(membership)
        return membership

    async def update(self, membership: Membership) -> Membership:
        """Update existing membership"""
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership
