from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.staff import (
    AcceptInvitationUseCase,
    InviteStaffUseCase,
    MarkStaffLeftUseCase,
    ReactivateStaffUseCase,
    RevokeInvitationUseCase,
    SuspendStaffUseCase,
    UpdateMembershipUseCase,
)
from src.domain.entities import (
    AuditEventTypes,
    Invitation,
    InvitationStatus,
    Membership,
    MembershipStatus,
    Role,
    Tenant,
    User,
)
from src.domain.errors import DomainError


@pytest.fixture
def mock_uow(mock_uow):
    """Mock UnitOfWork with all repositories the staff use cases touch"""
    mock_uow.tenants = MagicMock()
    mock_uow.tenants.get_by_id = AsyncMock()

    mock_uow.users = MagicMock()
    mock_uow.users.get_by_email = AsyncMock(return_value=None)
    mock_uow.users.get_by_ids = AsyncMock(return_value=[])
    mock_uow.users.create = AsyncMock(side_effect=lambda user: user)

    mock_uow.roles = MagicMock()
    mock_uow.roles.get_visible_many = AsyncMock(return_value=[])

    mock_uow.memberships = MagicMock()
    mock_uow.memberships.get_by_user_and_tenant = AsyncMock(return_value=None)
    mock_uow.memberships.create = AsyncMock(side_effect=lambda membership: membership)
    mock_uow.memberships.update = AsyncMock(side_effect=lambda membership: membership)

    mock_uow.invitations = MagicMock()
    mock_uow.invitations.get_by_id = AsyncMock()
    mock_uow.invitations.get_by_token = AsyncMock()
    mock_uow.invitations.get_pending_by_tenant_and_email = AsyncMock(return_value=None)
    mock_uow.invitations.create = AsyncMock(side_effect=lambda invitation: invitation)
    mock_uow.invitations.update = AsyncMock(side_effect=lambda invitation: invitation)

    mock_uow.audit_events = MagicMock()
    mock_uow.audit_events.create = AsyncMock()
    return mock_uow


def make_roles(tenant_id, count=2):
    return [Role(tenant_id=tenant_id, key=f"ROLE_{i}", name=f"Role {i}") for i in range(count)]


def make_invitation(tenant_id, role_ids, **kwargs):
    defaults = dict(
        tenant_id=tenant_id,
        email="new.hire@acme.com",
        role_ids=[str(role_id) for role_id in role_ids],
        invite_metadata={"department": "Engineering"},
        token="invite-token",
        expires_at=datetime.utcnow() + timedelta(days=7),
    )
    defaults.update(kwargs)
    return Invitation(**defaults)


# ============================================================================
# InviteStaff
# ============================================================================


@pytest.mark.asyncio
async def test_invite_staff(mock_uow):
    tenant_id, inviter_id = uuid4(), uuid4()
    roles = make_roles(tenant_id)
    mock_uow.tenants.get_by_id.return_value = Tenant(id=tenant_id, name="Acme")
    mock_uow.roles.get_visible_many.return_value = roles

    response = await InviteStaffUseCase(mock_uow).execute(
        inviter_id, tenant_id, " New.Hire@Acme.com ", [role.id for role in roles], expires_in_days=3
    )

    assert response.email == "new.hire@acme.com"
    assert response.status == InvitationStatus.PENDING
    assert len(response.token) >= 32

    invitation = mock_uow.invitations.create.call_args[0][0]
    assert invitation.role_ids == [str(role.id) for role in roles]
    assert invitation.invited_by_user_id == inviter_id
    assert invitation.expires_at - datetime.utcnow() <= timedelta(days=3)
    assert mock_uow.audit_events.create.call_args[0][0].action == AuditEventTypes.STAFF_INVITED
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_invite_staff_requires_a_role(mock_uow):
    tenant_id = uuid4()
    mock_uow.tenants.get_by_id.return_value = Tenant(id=tenant_id, name="Acme")

    with pytest.raises(DomainError) as exc_info:
        await InviteStaffUseCase(mock_uow).execute(uuid4(), tenant_id, "a@acme.com", [])

    assert exc_info.value.code == "ROLES_REQUIRED"


@pytest.mark.asyncio
async def test_invite_staff_rejects_role_from_other_tenant(mock_uow):
    tenant_id = uuid4()
    mock_uow.tenants.get_by_id.return_value = Tenant(id=tenant_id, name="Acme")
    mock_uow.roles.get_visible_many.return_value = []

    with pytest.raises(DomainError) as exc_info:
        await InviteStaffUseCase(mock_uow).execute(uuid4(), tenant_id, "a@acme.com", [uuid4()])

    assert exc_info.value.code == "ROLE_NOT_FOUND"
    mock_uow.invitations.create.assert_not_called()


@pytest.mark.asyncio
async def test_invite_existing_member_is_rejected(mock_uow):
    tenant_id = uuid4()
    roles = make_roles(tenant_id, 1)
    user = User(email="a@acme.com", password_hash="x")
    mock_uow.tenants.get_by_id.return_value = Tenant(id=tenant_id, name="Acme")
    mock_uow.roles.get_visible_many.return_value = roles
    mock_uow.users.get_by_email.return_value = user
    mock_uow.memberships.get_by_user_and_tenant.return_value = Membership(
        tenant_id=tenant_id, user_id=user.id, primary_role_id=roles[0].id
    )

    with pytest.raises(DomainError) as exc_info:
        await InviteStaffUseCase(mock_uow).execute(uuid4(), tenant_id, "a@acme.com", [roles[0].id])

    assert exc_info.value.code == "ALREADY_MEMBER"


@pytest.mark.asyncio
async def test_duplicate_pending_invitation_is_rejected(mock_uow):
    tenant_id = uuid4()
    roles = make_roles(tenant_id, 1)
    mock_uow.tenants.get_by_id.return_value = Tenant(id=tenant_id, name="Acme")
    mock_uow.roles.get_visible_many.return_value = roles
    mock_uow.invitations.get_pending_by_tenant_and_email.return_value = make_invitation(
        tenant_id, [roles[0].id]
    )

    with pytest.raises(DomainError) as exc_info:
        await InviteStaffUseCase(mock_uow).execute(uuid4(), tenant_id, "new.hire@acme.com", [roles[0].id])

    assert exc_info.value.code == "INVITE_ALREADY_EXISTS"


# ============================================================================
# AcceptInvitation
# ============================================================================


@pytest.mark.asyncio
async def test_accept_invitation_creates_user_and_membership(mock_uow):
    tenant_id = uuid4()
    primary, additional = uuid4(), uuid4()
    invitation = make_invitation(tenant_id, [primary, additional])
    mock_uow.invitations.get_by_token.return_value = invitation

    response = await AcceptInvitationUseCase(mock_uow).execute(
        "invite-token", "new.hire@acme.com", password="SecurePass123!", first_name="New"
    )

    assert response.is_new_user is True
    assert response.access_token
    assert response.tenant_id == str(tenant_id)

    user = mock_uow.users.create.call_args[0][0]
    assert user.password_hash.startswith("$2")
    assert user.first_name == "New"

    membership = mock_uow.memberships.create.call_args[0][0]
    assert membership.primary_role_id == primary
    assert membership.additional_role_ids == [str(additional)]
    assert membership.status == MembershipStatus.ACTIVE
    assert membership.member_metadata == {"department": "Engineering"}

    assert invitation.status == InvitationStatus.ACCEPTED
    assert mock_uow.audit_events.create.call_args[0][0].action == AuditEventTypes.STAFF_ACTIVATED
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_accept_invitation_existing_user_needs_no_password(mock_uow):
    tenant_id = uuid4()
    invitation = make_invitation(tenant_id, [uuid4()])
    mock_uow.invitations.get_by_token.return_value = invitation
    mock_uow.users.get_by_email.return_value = User(email="new.hire@acme.com", password_hash="x")

    response = await AcceptInvitationUseCase(mock_uow).execute("invite-token", "new.hire@acme.com")

    assert response.is_new_user is False
    mock_uow.users.create.assert_not_called()


@pytest.mark.asyncio
async def test_accept_invitation_email_mismatch(mock_uow):
    mock_uow.invitations.get_by_token.return_value = make_invitation(uuid4(), [uuid4()])

    with pytest.raises(DomainError) as exc_info:
        await AcceptInvitationUseCase(mock_uow).execute("invite-token", "someone@else.com", "Password123")

    assert exc_info.value.code == "EMAIL_MISMATCH"


@pytest.mark.asyncio
async def test_accept_expired_invitation_marks_it_expired(mock_uow):
    invitation = make_invitation(uuid4(), [uuid4()], expires_at=datetime.utcnow() - timedelta(minutes=1))
    mock_uow.invitations.get_by_token.return_value = invitation

    with pytest.raises(DomainError) as exc_info:
        await AcceptInvitationUseCase(mock_uow).execute("invite-token", "new.hire@acme.com", "Password123")

    assert exc_info.value.code == "INVITATION_EXPIRED"
    assert invitation.status == InvitationStatus.EXPIRED
    mock_uow.commit.assert_awaited_once()
    mock_uow.memberships.create.assert_not_called()


@pytest.mark.asyncio
async def test_accept_revoked_invitation_is_rejected(mock_uow):
    mock_uow.invitations.get_by_token.return_value = make_invitation(
        uuid4(), [uuid4()], status=InvitationStatus.REVOKED
    )

    with pytest.raises(DomainError) as exc_info:
        await AcceptInvitationUseCase(mock_uow).execute("invite-token", "new.hire@acme.com", "Password123")

    assert exc_info.value.code == "INVITATION_NOT_PENDING"


@pytest.mark.asyncio
async def test_accept_invitation_short_password(mock_uow):
    mock_uow.invitations.get_by_token.return_value = make_invitation(uuid4(), [uuid4()])

    with pytest.raises(DomainError) as exc_info:
        await AcceptInvitationUseCase(mock_uow).execute("invite-token", "new.hire@acme.com", "short")

    assert exc_info.value.code == "INVALID_PASSWORD"


@pytest.mark.asyncio
async def test_accept_invitation_lost_race_reports_already_member(mock_uow):
    """A concurrent accept created the membership first"""
    tenant_id = uuid4()
    mock_uow.invitations.get_by_token.return_value = make_invitation(tenant_id, [uuid4()])
    mock_uow.users.get_by_email.return_value = User(email="new.hire@acme.com", password_hash="x")
    mock_uow.memberships.create.side_effect = DomainError("MEMBERSHIP_EXISTS", "exists")

    with pytest.raises(DomainError) as exc_info:
        await AcceptInvitationUseCase(mock_uow).execute("invite-token", "new.hire@acme.com")

    assert exc_info.value.code == "ALREADY_MEMBER"
    mock_uow.rollback.assert_awaited_once()
    mock_uow.commit.assert_not_called()


# ============================================================================
# UpdateMembership and status helpers
# ============================================================================


def active_membership(tenant_id, status=MembershipStatus.ACTIVE):
    return Membership(
        tenant_id=tenant_id,
        user_id=uuid4(),
        primary_role_id=uuid4(),
        status=status,
        member_metadata={"department": "Engineering", "team": "Platform"},
    )


@pytest.mark.asyncio
async def test_update_membership_roles_and_metadata(mock_uow):
    tenant_id = uuid4()
    membership = active_membership(tenant_id)
    roles = make_roles(tenant_id)
    mock_uow.memberships.get_by_user_and_tenant.return_value = membership
    mock_uow.roles.get_visible_many.return_value = roles
    cache = MagicMock()

    await UpdateMembershipUseCase(mock_uow, cache).execute(
        uuid4(),
        tenant_id,
        membership.user_id,
        primary_role_id=roles[0].id,
        additional_role_ids=[roles[1].id],
        metadata={"team": None, "managerId": "m-1"},
    )

    assert membership.primary_role_id == roles[0].id
    assert membership.additional_role_ids == [str(roles[1].id)]
    assert membership.member_metadata == {"department": "Engineering", "managerId": "m-1"}
    assert mock_uow.audit_events.create.call_args[0][0].action == AuditEventTypes.STAFF_UPDATED
    cache.invalidate_membership.assert_called_once_with(tenant_id, membership.user_id)


@pytest.mark.asyncio
async def test_update_membership_rejects_unknown_role(mock_uow):
    tenant_id = uuid4()
    membership = active_membership(tenant_id)
    mock_uow.memberships.get_by_user_and_tenant.return_value = membership
    mock_uow.roles.get_visible_many.return_value = []

    with pytest.raises(DomainError) as exc_info:
        await UpdateMembershipUseCase(mock_uow).execute(
            uuid4(), tenant_id, membership.user_id, primary_role_id=uuid4()
        )

    assert exc_info.value.code == "ROLE_NOT_FOUND"
    mock_uow.memberships.update.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "use_case_class, start, expected_status, expected_action",
    [
        (SuspendStaffUseCase, MembershipStatus.ACTIVE, MembershipStatus.SUSPENDED, AuditEventTypes.STAFF_SUSPENDED),
        (ReactivateStaffUseCase, MembershipStatus.SUSPENDED, MembershipStatus.ACTIVE, AuditEventTypes.STAFF_REACTIVATED),
        (MarkStaffLeftUseCase, MembershipStatus.ACTIVE, MembershipStatus.LEFT, AuditEventTypes.STAFF_LEFT),
    ],
)
async def test_status_changes_record_matching_audit_event(
    mock_uow, use_case_class, start, expected_status, expected_action
):
    tenant_id = uuid4()
    membership = active_membership(tenant_id, status=start)
    mock_uow.memberships.get_by_user_and_tenant.return_value = membership
    cache = MagicMock()

    response = await use_case_class(mock_uow, cache).execute(uuid4(), tenant_id, membership.user_id)

    assert response.status == expected_status
    assert mock_uow.audit_events.create.call_args[0][0].action == expected_action
    cache.invalidate_membership.assert_called_once_with(tenant_id, membership.user_id)


@pytest.mark.asyncio
async def test_left_is_terminal(mock_uow):
    tenant_id = uuid4()
    membership = active_membership(tenant_id, status=MembershipStatus.LEFT)
    mock_uow.memberships.get_by_user_and_tenant.return_value = membership

    with pytest.raises(DomainError) as exc_info:
        await ReactivateStaffUseCase(mock_uow).execute(uuid4(), tenant_id, membership.user_id)

    assert exc_info.value.code == "MEMBERSHIP_LEFT"
    mock_uow.memberships.update.assert_not_called()


@pytest.mark.asyncio
async def test_update_unknown_membership(mock_uow):
    with pytest.raises(DomainError) as exc_info:
        await SuspendStaffUseCase(mock_uow).execute(uuid4(), uuid4(), uuid4())

    assert exc_info.value.code == "MEMBERSHIP_NOT_FOUND"


# ============================================================================
# RevokeInvitation
# ============================================================================


@pytest.mark.asyncio
async def test_revoke_pending_invitation(mock_uow):
    tenant_id = uuid4()
    invitation = make_invitation(tenant_id, [uuid4()])
    mock_uow.invitations.get_by_id.return_value = invitation

    response = await RevokeInvitationUseCase(mock_uow).execute(uuid4(), tenant_id, invitation.id)

    assert response.status == "revoked"
    assert invitation.status == InvitationStatus.REVOKED
    assert mock_uow.audit_events.create.call_args[0][0].action == AuditEventTypes.INVITATION_REVOKED


@pytest.mark.asyncio
async def test_revoke_invitation_of_other_tenant_is_not_found(mock_uow):
    invitation = make_invitation(uuid4(), [uuid4()])
    mock_uow.invitations.get_by_id.return_value = invitation

    with pytest.raises(DomainError) as exc_info:
        await RevokeInvitationUseCase(mock_uow).execute(uuid4(), uuid4(), invitation.id)

    assert exc_info.value.code == "INVITATION_NOT_FOUND"
