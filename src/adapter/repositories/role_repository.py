from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import selectinload
from sqlmodel import col, or_, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.role_repository import IRoleRepository
from src.domain.entities import PermissionScope, Role, RolePermission


def _with_grants(stmt):
    """Eager-load grants and their permissions (no lazy loads under asyncio)"""
    return stmt.options(
        selectinload(Role.permissions).selectinload(RolePermission.permission)
    ).execution_options(populate_existing=True)


class RoleRepository(IRoleRepository):
    """Role repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _visible_to(self, tenant_id: UUID):
        return or_(Role.tenant_id == tenant_id, col(Role.tenant_id).is_(None))

    async def get_by_id(self, role_id: UUID) -> Optional[Role]:
        """Get role with its permission grants by ID"""
        stmt = _with_grants(select(Role).where(Role.id == role_id))
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_visible(self, role_id: UUID, tenant_id: UUID) -> Optional[Role]:
        """Get a role owned by the tenant or a system role"""
        stmt = _with_grants(
            select(Role).where(Role.id == role_id, self._visible_to(tenant_id))
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_visible_many(self, role_ids: List[UUID], tenant_id: UUID) -> List[Role]:
        """Get the roles among role_ids visible to the tenant"""
        if not role_ids:
            return []
        stmt = select(Role).where(col(Role.id).in_(role_ids), self._visible_to(tenant_id))
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_by_key(self, tenant_id: Optional[UUID], key: str) -> Optional[Role]:
        """Get role by key; tenant_id None looks up a system role"""
        tenant_filter = (
            col(Role.tenant_id).is_(None) if tenant_id is None else Role.tenant_id == tenant_id
        )
        stmt = _with_grants(select(Role).where(Role.key == key, tenant_filter))
        result = await self.session.exec(stmt)
        return result.first()

    async def list_for_tenant(self, tenant_id: UUID) -> List[Role]:
        """System roles first, then tenant roles, each ordered by name"""
        stmt = _with_grants(
            select(Role)
            .where(self._visible_to(tenant_id))
            .order_by(col(Role.is_system_default).desc(), col(Role.name))
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, role: Role) -> Role:
        """Create a new role"""
        self.session.add(role)
        await self.session.flush()
        return await self.get_by_id(role.id)

    async def update(self, role: Role) -> Role:
        """Update existing role"""
        role.updated_at = datetime.utcnow()
        self.session.add(role)
        await self.session.flush()
        return await self.get_by_id(role.id)

    async def delete(self, role: Role) -> None:
        """Delete a role; grants cascade"""
        await self.session.delete(role)
        await self.session.flush()

    async def get_grant(self, role_id: UUID, permission_id: UUID) -> Optional[RolePermission]:
        """Get the grant of a permission to a role"""
        stmt = select(RolePermission).where(
            RolePermission.role_id == role_id,
            RolePermission.permission_id == permission_id,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def save_grant(self, grant: RolePermission) -> RolePermission:
        """Create or update a single grant"""
        self.session.add(grant)
        await self.session.flush()
        await self.session.refresh(grant)
        return grant

    async def replace_grants(
        self,
        role: Role,
        grants: List[Tuple[UUID, Optional[PermissionScope]]],
    ) -> Role:
        """Replace all grants of a role with (permission_id, scope) pairs"""
        role.permissions.clear()
        # Deletes must reach the database before re-inserting the same pairs
        await self.session.flush()

        for permission_id, scope in grants:
            role.permissions.append(
                RolePermission(
                    role_id=role.id,
                    permission_id=permission_id,
                    tenant_id=role.tenant_id,
                    scope=scope,
                )
            )
        return await self.update(role)
