"""
User Entity

Represents a person who can belong to multiple tenants.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Relationship, SQLModel

from .enums import LegacyUserRole, UserStatus

if TYPE_CHECKING:
    from .membership import Membership


class User(SQLModel, table=True):
    """
    User entity - represents a person who can belong to multiple tenants.

    Business Rules:
    - Email must be unique across all users
    - Password stored as bcrypt hash
    - At most one Membership per tenant
    - tenant_id and role are legacy single-tenant fields; they seed a
      Membership during backfill and are never read for authorization
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)

    status: UserStatus = Field(default=UserStatus.ACTIVE)

    # Legacy single-tenant assignment
    tenant_id: Optional[UUID] = Field(default=None, foreign_key="tenants.id", index=True)
    role: LegacyUserRole = Field(default=LegacyUserRole.EMPLOYEE)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    # Relationships
    memberships: list["Membership"] = Relationship(back_populates="user")
