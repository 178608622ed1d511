"""
Role Entities

Roles and their scoped permission grants.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from .enums import PermissionScope
from .permission import Permission


class Role(SQLModel, table=True):
    """
    Role entity - named set of scoped permission grants.

    Business Rules:
    - tenant_id NULL marks a system role shared by every tenant
    - (tenant_id, key) is unique
    - System defaults are not editable and cannot be deleted
    - A role cannot be deleted while a membership references it
    """

    __tablename__ = "roles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: Optional[UUID] = Field(default=None, foreign_key="tenants.id", index=True)

    key: str = Field(max_length=64)
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=500)

    is_system_default: bool = Field(default=False)
    is_editable: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    # Relationships
    permissions: list["RolePermission"] = Relationship(
        back_populates="role",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )

    __table_args__ = (Index("idx_role_tenant_key", "tenant_id", "key", unique=True),)

    @property
    def is_system(self) -> bool:
        return self.tenant_id is None


class RolePermission(SQLModel, table=True):
    """
    RolePermission entity - grants a Permission to a Role with an optional scope.

    A NULL scope is unrestricted and behaves like ORG.
    """

    __tablename__ = "role_permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    role_id: UUID = Field(foreign_key="roles.id", nullable=False, index=True)
    permission_id: UUID = Field(foreign_key="permissions.id", nullable=False)
    tenant_id: Optional[UUID] = Field(default=None, index=True)

    scope: Optional[PermissionScope] = Field(default=None)

    # Relationships
    role: Role = Relationship(back_populates="permissions")
    permission: Permission = Relationship()

    __table_args__ = (
        Index("idx_role_permission_unique", "role_id", "permission_id", unique=True),
    )
