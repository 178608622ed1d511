"""
Role Use Case DTOs (Data Transfer Objects)

All Command and Response classes for role management.
Provides type safety and clear contracts between layers.
"""

from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities import PermissionScope, Role


# ============================================================================
# Command DTOs
# ============================================================================


class PermissionGrantInput(BaseModel):
    """Permission to grant to a role, with an optional scope"""

    permission_id: UUID
    scope: Optional[PermissionScope] = None


# ============================================================================
# Response DTOs
# ============================================================================


class RolePermissionResponse(BaseModel):
    """Scoped grant in a role response"""

    permission_id: str
    permission_key: str
    resource: str
    action: str
    scope: Optional[PermissionScope]


class RoleResponse(BaseModel):
    """Role with its grants"""

    id: str
    tenant_id: Optional[str]
    name: str
    key: str
    description: Optional[str]
    is_system_default: bool
    is_editable: bool
    permissions: List[RolePermissionResponse]
    created_at: str
    updated_at: str

    @classmethod
    def from_role(cls, role: Role) -> "RoleResponse":
        return cls(
            id=str(role.id),
            tenant_id=str(role.tenant_id) if role.tenant_id else None,
            name=role.name,
            key=role.key,
            description=role.description,
            is_system_default=role.is_system_default,
            is_editable=role.is_editable,
            permissions=[
                RolePermissionResponse(
                    permission_id=str(grant.permission_id),
                    permission_key=grant.permission.key,
                    resource=grant.permission.resource,
                    action=grant.permission.action,
                    scope=grant.scope,
                )
                for grant in role.permissions
            ],
            created_at=role.created_at.isoformat(),
            updated_at=role.updated_at.isoformat(),
        )


class PermissionResponse(BaseModel):
    """Catalog permission"""

    id: str
    key: str
    action: str
    description: Optional[str]


class PermissionCatalogResponse(BaseModel):
    """Permissions grouped by resource"""

    resources: Dict[str, List[PermissionResponse]]


class DeleteRoleResponse(BaseModel):
    """Response for delete role use case"""

    status: str
