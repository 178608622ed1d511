"""
Membership Entity

Links User to Tenant with roles and a lifecycle status.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, Relationship, SQLModel

from .enums import MembershipStatus

if TYPE_CHECKING:
    from .user import User
    from .tenant import Tenant


class Membership(SQLModel, table=True):
    """
    Membership entity - binds a User to a Tenant.

    Business Rules:
    - (tenant_id, user_id) must be unique
    - Primary role first, then additional roles, in assignment order
    - Only ACTIVE memberships pass permission checks
    - LEFT is terminal; memberships are never hard-deleted
    - member_metadata (department, team, managerId) is only used for
      TEAM scope comparison
    """

    __tablename__ = "memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    primary_role_id: UUID = Field(foreign_key="roles.id", nullable=False, index=True)
    # Stored as a JSON list of role id strings
    additional_role_ids: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    status: MembershipStatus = Field(default=MembershipStatus.ACTIVE)
    member_metadata: dict = Field(default_factory=dict, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    # Relationships
    user: "User" = Relationship(back_populates="memberships")
    tenant: "Tenant" = Relationship(back_populates="memberships")

    __table_args__ = (
        Index("idx_membership_tenant_user", "tenant_id", "user_id", unique=True),
        Index("idx_membership_status", "status"),
    )

    @property
    def role_ids(self) -> List[UUID]:
        """Primary role followed by additional roles"""
        return [self.primary_role_id] + [UUID(str(role_id)) for role_id in self.additional_role_ids or []]

    def references_role(self, role_id: UUID) -> bool:
        return role_id in self.role_ids
