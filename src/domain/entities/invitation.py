"""
Invitation Entity

Pending invitations to join a tenant.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from .enums import InvitationStatus


class Invitation(SQLModel, table=True):
    """
    Invitation entity - pending invitations to join a tenant.

    Business Rules:
    - At least one role; the first becomes the membership's primary role
    - Expires after INVITATION_TTL_DAYS (7 by default)
    - Token is single-use, cryptographically secure
    - Cannot invite existing members or duplicate a pending invitation
    """

    __tablename__ = "invitations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    email: str = Field(max_length=255, nullable=False, index=True)
    invited_by_user_id: Optional[UUID] = Field(default=None)

    # Ordered role id strings
    role_ids: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    invite_metadata: dict = Field(default_factory=dict, sa_column=Column(JSON))
    token: str = Field(unique=True, index=True, max_length=64)

    status: InvitationStatus = Field(default=InvitationStatus.PENDING)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime))
    created_at: datetime = Field(
        default_factory=datetime.utcnow, sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_invitation_expires_at", "expires_at"),
        Index("idx_invitation_tenant_email", "tenant_id", "email"),
        Index("idx_invitation_status", "status"),
    )
