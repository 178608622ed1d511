"""
Seed Access Control Use Case

Idempotently writes the permission catalog, the system roles and their grants.
"""

import logging

from src.app.services.unit_of_work import UnitOfWork
from src.domain.access_control_defaults import (
    PERMISSIONS,
    ROLE_PERMISSIONS,
    SYSTEM_ROLE_DEFINITIONS,
)
from src.domain.entities import Permission, Role, RolePermission

from .dtos import SeedAccessControlResponse

logger = logging.getLogger(__name__)


async def upsert_system_role(uow: UnitOfWork, key: str) -> Role:
    """Create the system role ``key`` or refresh its name and flags"""
    definition = SYSTEM_ROLE_DEFINITIONS[key]
    role = await uow.roles.get_by_key(None, key)

    if role is None:
        return await uow.roles.create(
            Role(
                tenant_id=None,
                key=key,
                name=definition.name,
                description=definition.description,
                is_system_default=definition.is_system_default,
                is_editable=definition.is_editable,
            )
        )

    role.name = definition.name
    role.description = definition.description
    role.is_system_default = definition.is_system_default
    role.is_editable = definition.is_editable
    return await uow.roles.update(role)


class SeedAccessControlUseCase:
    """
    Use case for seeding the access control catalog.

    Safe to run on every start: permissions are upserted by key, system roles
    by (NULL tenant, key), grants by (role, permission). Grants are never
    removed, so operators can extend system roles by hand.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> SeedAccessControlResponse:
        async with self.uow:
            for definition in PERMISSIONS:
                permission = await self.uow.permissions.get_by_key(definition.key)
                if permission is None:
                    permission = Permission(
                        key=definition.key,
                        resource=definition.resource,
                        action=definition.action,
                    )
                permission.description = definition.description
                await self.uow.permissions.save(permission)
            logger.info(f"Permissions ensured ({len(PERMISSIONS)})")

            roles = {}
            for key in SYSTEM_ROLE_DEFINITIONS:
                roles[key] = await upsert_system_role(self.uow, key)
            logger.info(f"System roles ensured ({len(roles)})")

            grant_count = 0
            for role_key, grants in ROLE_PERMISSIONS.items():
                role = roles[role_key]
                for key, scope in grants.items():
                    permission = await self.uow.permissions.get_by_key(key)
                    if permission is None:
                        logger.warning(f"Permission {key} missing for role {role_key}")
                        continue

                    grant = await self.uow.roles.get_grant(role.id, permission.id)
                    if grant is None:
                        grant = RolePermission(
                            role_id=role.id, permission_id=permission.id, tenant_id=None
                        )
                    grant.scope = scope
                    await self.uow.roles.save_grant(grant)
                    grant_count += 1
            logger.info(f"Role permissions ensured ({grant_count})")

            await self.uow.commit()

        return SeedAccessControlResponse(
            permissions=len(PERMISSIONS), roles=len(roles), grants=grant_count
        )
