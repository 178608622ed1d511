from uuid import UUID

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlmodel import col, select

from src.domain.entities import AuditEvent, AuditEventTypes, Permission, Role
from tests.integration.helpers import auth_headers


async def permission_ids(db_session, *keys):
    result = await db_session.exec(select(Permission).where(col(Permission.key).in_(keys)))
    by_key = {permission.key: str(permission.id) for permission in result.all()}
    return [by_key[key] for key in keys]


@pytest_asyncio.fixture
async def owner(seeded, create_tenant, create_member):
    tenant = await create_tenant()
    user = await create_member(tenant, "owner@acme.com", [seeded["TENANT_OWNER"]])
    return tenant, user, auth_headers(user.id, tenant.id)


@pytest.mark.asyncio
async def test_list_roles_includes_system_roles(client: AsyncClient, owner):
    _, _, headers = owner

    response = await client.get("/roles", headers=headers)

    assert response.status_code == 200
    keys = {role["key"] for role in response.json()}
    assert {"TENANT_OWNER", "HR_ADMIN", "LINE_MANAGER", "EMPLOYEE", "READ_ONLY"} <= keys
    assert all(role["tenant_id"] is None for role in response.json())


@pytest.mark.asyncio
async def test_permission_catalog_grouped_by_resource(client: AsyncClient, owner):
    _, _, headers = owner

    response = await client.get("/roles/permissions", headers=headers)

    assert response.status_code == 200
    resources = response.json()["resources"]
    assert {permission["action"] for permission in resources["roles"]} == {"view", "manage", "assign"}


@pytest.mark.asyncio
async def test_create_custom_role(client: AsyncClient, owner, db_session):
    tenant, _, headers = owner
    goals_view, feedback_give = await permission_ids(db_session, "goals.view", "feedback.give")

    response = await client.post(
        "/roles",
        json={
            "name": "Coach",
            "key": "COACH",
            "permissions": [
                {"permission_id": goals_view, "scope": "TEAM"},
                {"permission_id": feedback_give},
            ],
        },
        headers=headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["tenant_id"] == str(tenant.id)
    assert data["is_editable"] is True
    scopes = {grant["permission_key"]: grant["scope"] for grant in data["permissions"]}
    assert scopes == {"goals.view": "TEAM", "feedback.give": None}

    result = await db_session.exec(
        select(AuditEvent).where(AuditEvent.action == AuditEventTypes.ROLE_CREATED)
    )
    assert result.one().resource_id == data["id"]


@pytest.mark.asyncio
async def test_create_role_with_duplicate_key(client: AsyncClient, owner):
    _, _, headers = owner
    payload = {"name": "Coach", "key": "COACH"}

    first = await client.post("/roles", json=payload, headers=headers)
    second = await client.post("/roles", json=payload, headers=headers)

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["error"]["code"] == "ROLE_KEY_EXISTS"


@pytest.mark.asyncio
async def test_employee_cannot_create_roles(client: AsyncClient, seeded, create_tenant, create_member):
    tenant = await create_tenant()
    employee = await create_member(tenant, "emp@acme.com", [seeded["EMPLOYEE"]])

    response = await client.post(
        "/roles", json={"name": "Coach", "key": "COACH"}, headers=auth_headers(employee.id, tenant.id)
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "PERMISSION_DENIED"


@pytest.mark.asyncio
async def test_system_roles_are_not_found_for_mutation(client: AsyncClient, owner, seeded):
    _, _, headers = owner
    role_id = str(seeded["EMPLOYEE"].id)

    rename = await client.patch(f"/roles/{role_id}", json={"name": "Staff"}, headers=headers)
    delete = await client.delete(f"/roles/{role_id}", headers=headers)

    assert rename.status_code == 404
    assert rename.json()["error"]["code"] == "ROLE_NOT_FOUND"
    assert delete.status_code == 404
    assert delete.json()["error"]["code"] == "ROLE_NOT_FOUND"


@pytest.mark.asyncio
async def test_other_tenants_role_is_not_found(client: AsyncClient, owner, seeded, create_tenant, create_member):
    _, _, headers = owner
    other_tenant = await create_tenant("Other")
    other_owner = await create_member(other_tenant, "owner@other.com", [seeded["TENANT_OWNER"]])
    created = await client.post(
        "/roles",
        json={"name": "Private", "key": "PRIVATE"},
        headers=auth_headers(other_owner.id, other_tenant.id),
    )

    response = await client.get(f"/roles/{created.json()['id']}", headers=headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_assigned_permissions_take_effect_immediately(
    client: AsyncClient, owner, create_member, db_session
):
    tenant, _, headers = owner
    created = await client.post("/roles", json={"name": "Coach", "key": "COACH"}, headers=headers)
    role_id = created.json()["id"]

    coach_role = (await db_session.exec(select(Role).where(Role.id == UUID(role_id)))).one()
    coach = await create_member(tenant, "coach@acme.com", [coach_role])
    coach_headers = auth_headers(coach.id, tenant.id)

    before = await client.post(
        "/rbac/check", json={"resource": "goals", "action": "view"}, headers=coach_headers
    )
    (goals_view,) = await permission_ids(db_session, "goals.view")
    assigned = await client.put(
        f"/roles/{role_id}/permissions",
        json={"permissions": [{"permission_id": goals_view, "scope": "ORG"}]},
        headers=headers,
    )
    after = await client.post(
        "/rbac/check", json={"resource": "goals", "action": "view"}, headers=coach_headers
    )

    assert before.json()["allowed"] is False
    assert assigned.status_code == 200
    assert after.json()["allowed"] is True
    assert after.json()["matched_permission"]["role_name"] == "Coach"


@pytest.mark.asyncio
async def test_assign_unknown_permission(client: AsyncClient, owner):
    _, _, headers = owner
    created = await client.post("/roles", json={"name": "Coach", "key": "COACH"}, headers=headers)

    response = await client.put(
        f"/roles/{created.json()['id']}/permissions",
        json={"permissions": [{"permission_id": "00000000-0000-0000-0000-000000000000"}]},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "PERMISSION_NOT_FOUND"


@pytest.mark.asyncio
async def test_role_in_use_cannot_be_deleted(client: AsyncClient, owner, create_member, db_session):
    tenant, _, headers = owner
    created = await client.post("/roles", json={"name": "Coach", "key": "COACH"}, headers=headers)
    role_id = created.json()["id"]

    coach_role = (await db_session.exec(select(Role).where(Role.id == UUID(role_id)))).one()
    await create_member(tenant, "coach@acme.com", [coach_role])

    response = await client.delete(f"/roles/{role_id}", headers=headers)

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "ROLE_IN_USE"


@pytest.mark.asyncio
async def test_delete_unused_role(client: AsyncClient, owner):
    _, _, headers = owner
    created = await client.post("/roles", json={"name": "Coach", "key": "COACH"}, headers=headers)
    role_id = created.json()["id"]

    deleted = await client.delete(f"/roles/{role_id}", headers=headers)
    fetched = await client.get(f"/roles/{role_id}", headers=headers)

    assert deleted.status_code == 200
    assert deleted.json() == {"status": "deleted"}
    assert fetched.status_code == 404
