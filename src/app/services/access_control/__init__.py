"""
Access Control Core

Permission evaluation, scope checks and the lookup cache.
"""

from .access_control_service import AccessControlService
from .cache import (
    IAccessCache,
    InMemoryAccessCache,
    NullAccessCache,
    TTLCache,
    create_access_cache,
)
from .dtos import (
    DenialCode,
    MatchedPermission,
    MembershipInfo,
    PermissionCheckInput,
    PermissionContext,
    PermissionDecision,
    RoleGrant,
    RoleInfo,
    UserPermission,
)
from .readers import IMembershipReader, IRoleReader
from .scope_evaluator import ScopeEvaluator

__all__ = [
    "AccessControlService",
    "ScopeEvaluator",
    "IAccessCache",
    "InMemoryAccessCache",
    "NullAccessCache",
    "TTLCache",
    "create_access_cache",
    "IMembershipReader",
    "IRoleReader",
    "DenialCode",
    "MatchedPermission",
    "MembershipInfo",
    "PermissionCheckInput",
    "PermissionContext",
    "PermissionDecision",
    "RoleGrant",
    "RoleInfo",
    "UserPermission",
]
