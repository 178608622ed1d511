"""
SQL-backed readers for the access control engine.

Each read opens its own short-lived session so a single engine instance can
serve concurrent requests; results are immutable snapshots safe to cache.
"""

from typing import Callable, Optional
from uuid import UUID

from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.membership_repository import MembershipRepository
from src.adapter.repositories.role_repository import RoleRepository
from src.app.services.access_control import (
    IMembershipReader,
    IRoleReader,
    MembershipInfo,
    RoleGrant,
    RoleInfo,
)
from src.domain.entities import Membership, Role

SessionFactory = Callable[[], AsyncSession]


def to_membership_info(membership: Membership) -> MembershipInfo:
    return MembershipInfo(
        id=membership.id,
        tenant_id=membership.tenant_id,
        user_id=membership.user_id,
        primary_role_id=membership.primary_role_id,
        additional_role_ids=[UUID(str(role_id)) for role_id in membership.additional_role_ids or []],
        status=membership.status,
        metadata=dict(membership.member_metadata or {}),
    )


def to_role_info(role: Role) -> RoleInfo:
    return RoleInfo(
        id=role.id,
        tenant_id=role.tenant_id,
        name=role.name,
        key=role.key,
        permissions=[
            RoleGrant(
                key=grant.permission.key,
                resource=grant.permission.resource,
                action=grant.permission.action,
                scope=grant.scope,
            )
            for grant in role.permissions
        ],
    )


class SqlMembershipReader(IMembershipReader):
    """Membership reader implementation using SQLModel"""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    async def find_membership(
        self, tenant_id: UUID, user_id: UUID
    ) -> Optional[MembershipInfo]:
        async with self.session_factory() as session:
            membership = await MembershipRepository(session).get_by_user_and_tenant(
                user_id, tenant_id
            )
            return to_membership_info(membership) if membership else None


class SqlRoleReader(IRoleReader):
    """Role reader implementation using SQLModel"""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    async def find_role(self, role_id: UUID) -> Optional[RoleInfo]:
        async with self.session_factory() as session:
            role = await RoleRepository(session).get_by_id(role_id)
            return to_role_info(role) if role else None
