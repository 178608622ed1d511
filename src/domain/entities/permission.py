"""
Permission Entity

Immutable definition of an action on a resource.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Index, SQLModel


def permission_key(resource: str, action: str) -> str:
    """Canonical permission key: ``resource.action``"""
    return f"{resource}.{action}"


class Permission(SQLModel, table=True):
    """
    Permission entity - (resource, action) pair identified by ``resource.action``.

    Business Rules:
    - Seeded at bootstrap, never mutated through the public API
    - Carries no scope; scope is attached per RolePermission
    """

    __tablename__ = "permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    key: str = Field(unique=True, index=True, max_length=150)
    resource: str = Field(max_length=64)
    action: str = Field(max_length=64)
    description: Optional[str] = Field(default=None, max_length=255)

    __table_args__ = (
        Index("idx_permission_resource_action", "resource", "action", unique=True),
    )
