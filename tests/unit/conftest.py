import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.access_control import AccessControlService, InMemoryAccessCache
from tests.unit.factories import FakeStore


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def membership_reader(store):
    reader = MagicMock()
    reader.find_membership = AsyncMock(
        side_effect=lambda tenant_id, user_id: store.memberships.get((tenant_id, user_id))
    )
    return reader


@pytest.fixture
def role_reader(store):
    reader = MagicMock()
    reader.find_role = AsyncMock(side_effect=lambda role_id: store.roles.get(role_id))
    return reader


@pytest.fixture
def access_control(membership_reader, role_reader):
    return AccessControlService(membership_reader, role_reader, InMemoryAccessCache())
