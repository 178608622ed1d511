"""
Accept Invitation Use Case

Handles accepting staff invitations for both existing and new users.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

import bcrypt

from src.api.utils.jwt import generate_jwt
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    AuditEvent,
    AuditEventTypes,
    InvitationStatus,
    LegacyUserRole,
    Membership,
    MembershipStatus,
    User,
)
from src.domain.errors import DomainError

from .dtos import AcceptInvitationResponse

logger = logging.getLogger(__name__)


class AcceptInvitationUseCase:
    """
    Use case for accepting staff invitations.

    Business Rules:
    - Email must match the invited address
    - Only PENDING, unexpired invitations can be accepted
    - Existing users only gain a Membership; new users need a password
    - First invited role is primary, the rest are additional
    - One Membership per (tenant, user): a concurrent create is re-read and
      reported as ALREADY_MEMBER
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        token: str,
        email: str,
        password: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> AcceptInvitationResponse:
        """
        Execute accept invitation use case.

        Args:
            token: Invitation token
            email: Email the invitation was sent to
            password: Password (required only for new users)
            first_name: First name for new users
            last_name: Last name for new users

        Returns:
            AcceptInvitationResponse DTO with an access token for the tenant
        """
        email = email.strip().lower()

        async with self.uow:
            invitation = await self.uow.invitations.get_by_token(token)
            if invitation is None:
                raise DomainError("INVALID_TOKEN", "Invalid or non-existent invitation token")

            if invitation.email != email:
                raise DomainError("EMAIL_MISMATCH", "Email does not match invitation")

            if invitation.status == InvitationStatus.ACCEPTED:
                raise DomainError(
                    "INVITATION_ALREADY_ACCEPTED", "This invitation has already been accepted"
                )

            if invitation.status != InvitationStatus.PENDING:
                raise DomainError(
                    "INVITATION_NOT_PENDING",
                    f"Invitation status is {invitation.status.value}, expected PENDING",
                )

            if invitation.expires_at < datetime.utcnow():
                invitation.status = InvitationStatus.EXPIRED
                await self.uow.invitations.update(invitation)
                await self.uow.commit()
                raise DomainError("INVITATION_EXPIRED", "This invitation has expired")

            tenant_id = invitation.tenant_id
            invitation_id = invitation.id
            role_ids = [UUID(role_id) for role_id in invitation.role_ids]
            metadata = dict(invitation.invite_metadata or {})

            existing_user = await self.uow.users.get_by_email(email)
            if existing_user:
                user = existing_user
                user_is_new = False

                existing_membership = await self.uow.memberships.get_by_user_and_tenant(
                    user.id, tenant_id
                )
                if existing_membership:
                    raise DomainError(
                        "ALREADY_MEMBER", "User already has a membership in this tenant"
                    )
            else:
                if not password:
                    raise DomainError(
                        "PASSWORD_REQUIRED", "Password is required for new user registration"
                    )

                if len(password) < 8:
                    raise DomainError(
                        "INVALID_PASSWORD", "Password must be at least 8 characters long"
                    )

                password_hash = bcrypt.hashpw(
                    password.encode("utf-8"), bcrypt.gensalt(rounds=12)
                ).decode("utf-8")

                # Legacy columns mirror the first tenant joined
                user = await self.uow.users.create(
                    User(
                        email=email,
                        password_hash=password_hash,
                        first_name=first_name,
                        last_name=last_name,
                        tenant_id=tenant_id,
                        role=LegacyUserRole.EMPLOYEE,
                    )
                )
                user_is_new = True

            user_id = user.id

            try:
                membership = await self.uow.memberships.create(
                    Membership(
                        tenant_id=tenant_id,
                        user_id=user_id,
                        primary_role_id=role_ids[0],
                        additional_role_ids=[str(role_id) for role_id in role_ids[1:]],
                        status=MembershipStatus.ACTIVE,
                        member_metadata=metadata,
                    )
                )
            except DomainError as error:
                if error.code != "MEMBERSHIP_EXISTS":
                    raise
                # Lost a race with another accept for the same user
                await self.uow.rollback()
                existing = await self.uow.memberships.get_by_user_and_tenant(user_id, tenant_id)
                raise DomainError(
                    "ALREADY_MEMBER",
                    f"User already has a membership in this tenant: {existing.id if existing else ''}",
                ) from error

            membership_id = membership.id

            invitation.status = InvitationStatus.ACCEPTED
            await self.uow.invitations.update(invitation)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=user_id,
                    action=AuditEventTypes.STAFF_ACTIVATED,
                    resource_type="membership",
                    resource_id=str(membership_id),
                    event_metadata={
                        "invitation_id": str(invitation_id),
                        "email": email,
                        "is_new_user": user_is_new,
                        "role_ids": [str(role_id) for role_id in role_ids],
                    },
                )
            )

            await self.uow.commit()

        access_token = generate_jwt(user_id, tenant_id)

        logger.info(
            f"Invitation accepted: invitation={invitation_id} user={user_id} tenant={tenant_id}"
        )
        return AcceptInvitationResponse(
            access_token=access_token,
            user_id=str(user_id),
            tenant_id=str(tenant_id),
            membership_id=str(membership_id),
            is_new_user=user_is_new,
        )
