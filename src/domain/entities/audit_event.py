"""
AuditEvent Entity

Immutable log of staff, role and access-control mutations.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel


class AuditEventTypes:
    """Action names recorded in AuditEvent.action"""

    ROLE_CREATED = "role.created"
    ROLE_UPDATED = "role.updated"
    ROLE_PERMISSIONS_UPDATED = "role.permissions_updated"
    ROLE_DELETED = "role.deleted"
    STAFF_INVITED = "staff.invited"
    STAFF_ACTIVATED = "staff.activated"
    STAFF_UPDATED = "staff.updated"
    STAFF_SUSPENDED = "staff.suspended"
    STAFF_REACTIVATED = "staff.reactivated"
    STAFF_LEFT = "staff.left"
    INVITATION_REVOKED = "invitation.revoked"
    MEMBERSHIP_PROVISIONED = "membership.provisioned"


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of access-control mutations.

    Business Rules:
    - Immutable (never updated or deleted)
    - tenant_id nullable for global events
    - Metadata stores the resource touched and the changes applied
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    tenant_id: Optional[UUID] = Field(default=None, index=True)
    user_id: Optional[UUID] = Field(default=None, index=True)

    action: str = Field(max_length=100)  # e.g., "role.created"
    resource_type: Optional[str] = Field(default=None, max_length=50)
    resource_id: Optional[str] = Field(default=None, max_length=64)
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_tenant_action", "tenant_id", "action"),
    )
