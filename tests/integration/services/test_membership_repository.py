import warnings

import pytest

from src.adapter.repositories.invitation_repository import InvitationRepository
from src.adapter.repositories.membership_repository import MembershipRepository
from src.domain.entities import InvitationStatus


@pytest.mark.asyncio
async def test_membership_queries_emit_no_deprecation_warnings(
    session_factory, seeded, create_tenant, create_member
):
    tenant = await create_tenant()
    user = await create_member(
        tenant, "member@acme.com", [seeded["EMPLOYEE"], seeded["READ_ONLY"]], metadata={"department": "Sales"}
    )

    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        async with session_factory() as session:
            repository = MembershipRepository(session)
            membership = await repository.get_by_user_and_tenant(user.id, tenant.id)
            listed = await repository.get_by_tenant_id(tenant.id, department="Sales")
            in_use = await repository.count_by_role(seeded["READ_ONLY"].id)
            pending = await InvitationRepository(session).get_by_tenant_id(
                tenant.id, status=InvitationStatus.PENDING
            )

    assert membership.user_id == user.id
    assert [m.user_id for m in listed] == [user.id]
    assert in_use == 1
    assert pending == []
