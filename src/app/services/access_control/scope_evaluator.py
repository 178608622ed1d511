"""
Scope Evaluator

Decides whether the relationship between the acting member and the target
of a request satisfies the scope attached to a permission grant.
"""

from typing import Awaitable, Callable, Optional
from uuid import UUID

from src.domain.entities import PermissionScope

from .dtos import MembershipInfo, PermissionContext

MembershipLookup = Callable[[UUID, UUID], Awaitable[Optional[MembershipInfo]]]


class ScopeEvaluator:
    """
    Evaluates SELF / TEAM / ORG scopes.

    Rules:
    - No scope or ORG: always satisfied
    - SELF: no target, or the target is the acting user
    - TEAM: no target, the target is the acting user, the target reports to
      the acting user, or both share a non-empty department or team
    - Anything else: not satisfied

    ``lookup_membership`` resolves the target's membership for TEAM scope; the
    engine passes its cache-fronted lookup so the target read is cached too.
    """

    def __init__(self, lookup_membership: MembershipLookup):
        self.lookup_membership = lookup_membership
        self._evaluators = {
            None: self._evaluate_org,
            PermissionScope.ORG: self._evaluate_org,
            PermissionScope.SELF: self._evaluate_self,
            PermissionScope.TEAM: self._evaluate_team,
        }

    async def evaluate(
        self,
        scope: Optional[PermissionScope],
        acting: MembershipInfo,
        context: Optional[PermissionContext] = None,
    ) -> bool:
        evaluator = self._evaluators.get(scope)
        if evaluator is None:
            return False
        return await evaluator(acting, context or PermissionContext())

    async def _evaluate_org(self, acting: MembershipInfo, context: PermissionContext) -> bool:
        return True

    async def _evaluate_self(self, acting: MembershipInfo, context: PermissionContext) -> bool:
        # No target: the caller is acting on their own records
        if context.target_user_id is None:
            return True
        return context.target_user_id == acting.user_id

    async def _evaluate_team(self, acting: MembershipInfo, context: PermissionContext) -> bool:
        # No target: list-level access to the team
        if context.target_user_id is None:
            return True

        # Own records are always within the actor's team
        if context.target_user_id == acting.user_id:
            return True

        target = await self.lookup_membership(acting.tenant_id, context.target_user_id)
        if target is None:
            return False

        if target.manager_id is not None and target.manager_id == str(acting.user_id):
            return True

        # Unset metadata never counts as a match
        if acting.department is not None and acting.department == target.department:
            return True
        return acting.team is not None and acting.team == target.team
