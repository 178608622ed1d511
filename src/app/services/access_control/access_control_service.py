"""
Access Control Service

Multi-tenant RBAC permission evaluation.

Usage:
    access_control = AccessControlService(membership_reader, role_reader)
    decision = await access_control.check_permission(
        tenant_id, user_id, "staff", "manage",
        PermissionContext(target_user_id=other_user_id),
    )
    if not decision.allowed:
        ...
"""

import asyncio
import logging
from typing import Dict, List, Optional
from uuid import UUID

from src.domain.entities import MembershipStatus, PermissionScope, permission_key

from .cache import IAccessCache, InMemoryAccessCache
from .dtos import (
    DenialCode,
    MatchedPermission,
    MembershipInfo,
    PermissionCheckInput,
    PermissionContext,
    PermissionDecision,
    RoleInfo,
    UserPermission,
)
from .readers import IMembershipReader, IRoleReader
from .scope_evaluator import ScopeEvaluator

logger = logging.getLogger(__name__)

NO_MEMBERSHIP_REASON = "No active membership found for user in this tenant"
INTERNAL_ERROR_REASON = "Internal error during permission check"

# Higher wins when collapsing grants for enumeration
_SCOPE_BREADTH = {
    PermissionScope.SELF: 1,
    PermissionScope.TEAM: 2,
    PermissionScope.ORG: 3,
}


class AccessControlService:
    """
    Permission checking engine.

    Business Rules:
    - Only ACTIVE memberships are granted anything
    - Roles are consulted primary first, then additional roles in order
    - The first grant whose scope is satisfied wins; no search for a
      broader grant in later roles
    - check_permission never raises: any failure is a deny
    - Membership and role reads go through the cache; the engine never
      writes to the store
    """

    def __init__(
        self,
        membership_reader: IMembershipReader,
        role_reader: IRoleReader,
        cache: Optional[IAccessCache] = None,
    ):
        self.membership_reader = membership_reader
        self.role_reader = role_reader
        self.cache = cache if cache is not None else InMemoryAccessCache()
        self.scope_evaluator = ScopeEvaluator(self.get_membership)

    async def check_permission(
        self,
        tenant_id: UUID,
        user_id: UUID,
        resource: str,
        action: str,
        context: Optional[PermissionContext] = None,
    ) -> PermissionDecision:
        """
        Check whether a user may perform an action on a resource in a tenant.

        Args:
            tenant_id: Tenant the request is made in
            user_id: Acting user
            resource: Resource name (e.g. "goals")
            action: Action name (e.g. "view")
            context: Optional target of the action, used for SELF/TEAM scopes

        Returns:
            PermissionDecision; denied decisions carry a reason and denial code
        """
        if not (tenant_id and user_id and resource and action):
            return PermissionDecision.deny(
                DenialCode.INVALID_INPUT,
                "tenant_id, user_id, resource and action are required",
            )

        key = permission_key(resource, action)

        try:
            membership = await self.get_membership(tenant_id, user_id)
            if membership is None:
                logger.warning(
                    f"Permission denied: tenant={tenant_id} user={user_id} key={key} "
                    f"reason=no membership"
                )
                return PermissionDecision.deny(DenialCode.NO_MEMBERSHIP, NO_MEMBERSHIP_REASON)

            if membership.status != MembershipStatus.ACTIVE:
                logger.warning(
                    f"Permission denied: tenant={tenant_id} user={user_id} key={key} "
                    f"reason=membership {membership.status.value}"
                )
                return PermissionDecision.deny(
                    DenialCode.INACTIVE_MEMBERSHIP,
                    f"Membership status is {membership.status.value}, expected ACTIVE",
                )

            roles = await self._get_roles(membership)

            for role in roles:
                for grant in role.permissions:
                    if grant.key != key:
                        continue
                    if await self.scope_evaluator.evaluate(grant.scope, membership, context):
                        scope_name = grant.scope.value if grant.scope else None
                        logger.info(
                            f"Permission granted: tenant={tenant_id} user={user_id} key={key} "
                            f"role={role.name} scope={scope_name}"
                        )
                        return PermissionDecision.allow(
                            MatchedPermission(key=grant.key, scope=grant.scope, role_name=role.name)
                        )

            logger.warning(
                f"Permission denied: tenant={tenant_id} user={user_id} key={key} "
                f"reason=no matching grant"
            )
            return PermissionDecision.deny(
                DenialCode.PERMISSION_NOT_GRANTED,
                f"Permission '{key}' not granted by any role",
            )

        except Exception:
            logger.exception(
                f"Error checking permission: tenant={tenant_id} user={user_id} key={key}"
            )
            return PermissionDecision.deny(DenialCode.INTERNAL_ERROR, INTERNAL_ERROR_REASON)

    async def check_permissions(
        self, inputs: List[PermissionCheckInput]
    ) -> List[PermissionDecision]:
        """Run independent checks; results are in input order"""
        return list(
            await asyncio.gather(
                *(
                    self.check_permission(
                        check.tenant_id,
                        check.user_id,
                        check.resource,
                        check.action,
                        check.context,
                    )
                    for check in inputs
                )
            )
        )

    async def any_allowed(self, inputs: List[PermissionCheckInput]) -> bool:
        if not inputs:
            return False
        return any(decision.allowed for decision in await self.check_permissions(inputs))

    async def all_allowed(self, inputs: List[PermissionCheckInput]) -> bool:
        if not inputs:
            return False
        return all(decision.allowed for decision in await self.check_permissions(inputs))

    async def get_user_permissions(
        self, tenant_id: UUID, user_id: UUID
    ) -> List[UserPermission]:
        """
        List every permission key reachable by a user, with the broadest scope.

        Unset scopes count as ORG. Meant for rendering, not for gating.
        """
        membership = await self.get_membership(tenant_id, user_id)
        if membership is None or membership.status != MembershipStatus.ACTIVE:
            return []

        permissions: Dict[str, PermissionScope] = {}
        for role in await self._get_roles(membership):
            for grant in role.permissions:
                scope = grant.scope or PermissionScope.ORG
                existing = permissions.get(grant.key)
                if existing is None or _SCOPE_BREADTH[scope] > _SCOPE_BREADTH[existing]:
                    permissions[grant.key] = scope

        return [UserPermission(key=key, scope=scope) for key, scope in permissions.items()]

    async def get_membership(
        self, tenant_id: UUID, user_id: UUID
    ) -> Optional[MembershipInfo]:
        """Cached membership lookup"""
        cached = self.cache.get_membership(tenant_id, user_id)
        if cached is not None:
            return cached

        membership = await self.membership_reader.find_membership(tenant_id, user_id)
        if membership is not None:
            self.cache.put_membership(membership)
        return membership

    async def get_role(self, role_id: UUID) -> Optional[RoleInfo]:
        """Cached role lookup"""
        cached = self.cache.get_role(role_id)
        if cached is not None:
            return cached

        role = await self.role_reader.find_role(role_id)
        if role is not None:
            self.cache.put_role(role)
        return role

    async def _get_roles(self, membership: MembershipInfo) -> List[RoleInfo]:
        roles = await asyncio.gather(*(self.get_role(role_id) for role_id in membership.role_ids))
        return [role for role in roles if role is not None]

    def invalidate_membership(self, tenant_id: UUID, user_id: UUID) -> None:
        self.cache.invalidate_membership(tenant_id, user_id)

    def invalidate_role(self, role_id: UUID) -> None:
        self.cache.invalidate_role(role_id)

    def clear_cache(self) -> None:
        """Drop all cached memberships and roles"""
        self.cache.clear()
