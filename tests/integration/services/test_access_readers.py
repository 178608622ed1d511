import pytest

from src.adapter.services.access_readers import SqlMembershipReader, SqlRoleReader
from src.domain.entities import MembershipStatus, PermissionScope


@pytest.mark.asyncio
async def test_membership_reader_returns_snapshot(session_factory, seeded, create_tenant, create_member):
    tenant = await create_tenant()
    user = await create_member(
        tenant,
        "member@acme.com",
        [seeded["LINE_MANAGER"], seeded["READ_ONLY"]],
        metadata={"department": "Engineering", "managerId": "abc"},
    )

    membership = await SqlMembershipReader(session_factory).find_membership(tenant.id, user.id)

    assert membership.user_id == user.id
    assert membership.status == MembershipStatus.ACTIVE
    assert membership.role_ids == [seeded["LINE_MANAGER"].id, seeded["READ_ONLY"].id]
    assert membership.department == "Engineering"
    assert membership.manager_id == "abc"


@pytest.mark.asyncio
async def test_membership_reader_scoped_to_tenant(session_factory, seeded, create_tenant, create_member):
    tenant = await create_tenant()
    other = await create_tenant("Other")
    user = await create_member(tenant, "member@acme.com", [seeded["EMPLOYEE"]])

    assert await SqlMembershipReader(session_factory).find_membership(other.id, user.id) is None


@pytest.mark.asyncio
async def test_role_reader_loads_grants(session_factory, seeded):
    role = await SqlRoleReader(session_factory).find_role(seeded["EMPLOYEE"].id)

    scopes = {grant.key: grant.scope for grant in role.permissions}
    assert role.key == "EMPLOYEE"
    assert scopes["goals.manage"] == PermissionScope.SELF
    assert scopes["feedback.give"] == PermissionScope.ORG
