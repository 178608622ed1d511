"""
Tenant Entity

Represents an isolated organization.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from .enums import TenantStatus

if TYPE_CHECKING:
    from .membership import Membership


class Tenant(SQLModel, table=True):
    """
    Tenant entity - isolation boundary for memberships, custom roles and data.

    Business Rules:
    - Memberships and custom roles never cross tenant boundaries
    - System roles (tenant_id = NULL) are visible to every tenant
    """

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)

    status: TenantStatus = Field(default=TenantStatus.ACTIVE)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    # Relationships
    memberships: list["Membership"] = Relationship(back_populates="tenant")

    __table_args__ = (Index("idx_tenant_status", "status"),)
