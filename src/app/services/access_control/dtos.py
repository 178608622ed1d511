"""
Access Control DTOs

Immutable snapshots and decision types exchanged with the engine.
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import MembershipStatus, PermissionScope


# ============================================================================
# Store snapshots (what the cache holds)
# ============================================================================


class MembershipInfo(BaseModel):
    """Resolved membership of a user in a tenant"""

    model_config = ConfigDict(frozen=True)

    id: UUID
    tenant_id: UUID
    user_id: UUID
    primary_role_id: UUID
    additional_role_ids: List[UUID] = Field(default_factory=list)
    status: MembershipStatus
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def role_ids(self) -> List[UUID]:
        return [self.primary_role_id, *self.additional_role_ids]

    @property
    def manager_id(self) -> Optional[str]:
        value = self.metadata.get("managerId")
        return str(value) if value is not None else None

    @property
    def department(self) -> Optional[str]:
        return self.metadata.get("department") or None

    @property
    def team(self) -> Optional[str]:
        return self.metadata.get("team") or None


class RoleGrant(BaseModel):
    """A permission granted by a role, with its scope"""

    model_config = ConfigDict(frozen=True)

    key: str
    resource: str
    action: str
    scope: Optional[PermissionScope] = None


class RoleInfo(BaseModel):
    """Resolved role with its grants"""

    model_config = ConfigDict(frozen=True)

    id: UUID
    tenant_id: Optional[UUID] = None
    name: str
    key: str
    permissions: List[RoleGrant] = Field(default_factory=list)


# ============================================================================
# Check input / output
# ============================================================================


class PermissionContext(BaseModel):
    """
    Target of a permission check.

    Only target_user_id takes part in scope evaluation; the other fields are
    carried for callers.
    """

    model_config = ConfigDict(frozen=True)

    target_user_id: Optional[UUID] = None
    target_department: Optional[str] = None
    target_team: Optional[str] = None
    extra: Dict[str, Any] = Field(default_factory=dict)


class PermissionCheckInput(BaseModel):
    """One permission check for batch evaluation"""

    tenant_id: UUID
    user_id: UUID
    resource: str
    action: str
    context: Optional[PermissionContext] = None


class DenialCode(str, Enum):
    """Why a permission check was denied"""

    INVALID_INPUT = "INVALID_INPUT"
    NO_MEMBERSHIP = "NO_MEMBERSHIP"
    INACTIVE_MEMBERSHIP = "INACTIVE_MEMBERSHIP"
    PERMISSION_NOT_GRANTED = "PERMISSION_NOT_GRANTED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class MatchedPermission(BaseModel):
    """The grant that allowed a check"""

    model_config = ConfigDict(frozen=True)

    key: str
    scope: Optional[PermissionScope] = None
    role_name: str


class PermissionDecision(BaseModel):
    """Result of a permission check; allowed is False unless a grant matched"""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    reason: Optional[str] = None
    denial: Optional[DenialCode] = None
    matched_permission: Optional[MatchedPermission] = None

    @classmethod
    def allow(cls, matched: MatchedPermission) -> "PermissionDecision":
        return cls(allowed=True, matched_permission=matched)

    @classmethod
    def deny(cls, denial: DenialCode, reason: str) -> "PermissionDecision":
        return cls(allowed=False, denial=denial, reason=reason)


class UserPermission(BaseModel):
    """Permission key reachable by a user with its broadest scope"""

    key: str
    scope: PermissionScope
