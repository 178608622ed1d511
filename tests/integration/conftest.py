from typing import List, Optional

import bcrypt
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.role_repository import RoleRepository
from src.adapter.repositories.tenant_repository import TenantRepository
from src.adapter.services.access_readers import SqlMembershipReader, SqlRoleReader
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.access_control import AccessControlService, InMemoryAccessCache
from src.app.use_cases.bootstrap import SeedAccessControlUseCase
from src.depends import get_access_control, get_unit_of_work
from src.domain.entities import Membership, MembershipStatus, Role, Tenant, User

# Hashing once keeps fixtures fast; rounds=4 is the bcrypt minimum
TEST_PASSWORD_HASH = bcrypt.hashpw(b"SecurePass123!", bcrypt.gensalt(rounds=4)).decode("utf-8")


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def access_control(session_factory):
    return AccessControlService(
        SqlMembershipReader(session_factory),
        SqlRoleReader(session_factory),
        InMemoryAccessCache(),
    )


@pytest_asyncio.fixture
async def seeded(session_factory):
    """Permission catalog and system roles, keyed by role key"""
    async with session_factory() as session:
        await SeedAccessControlUseCase(SqlAlchemyUnitOfWork(session)).execute()
    async with session_factory() as session:
        repository = RoleRepository(session)
        roles = {}
        for key in ("TENANT_OWNER", "HR_ADMIN", "LINE_MANAGER", "EMPLOYEE", "READ_ONLY"):
            roles[key] = await repository.get_by_key(None, key)
    return roles


@pytest_asyncio.fixture
async def client(session_factory, access_control):
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_access_control] = lambda: access_control

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def create_tenant(session_factory):
    async def _create(name: str = "Acme Corp") -> Tenant:
        async with session_factory() as session:
            tenant = await TenantRepository(session).create(Tenant(name=name))
            await session.commit()
            return tenant

    return _create


@pytest_asyncio.fixture
async def create_member(session_factory):
    """Create a user with a membership in a tenant"""

    async def _create(
        tenant: Tenant,
        email: str,
        roles: List[Role],
        status: MembershipStatus = MembershipStatus.ACTIVE,
        metadata: Optional[dict] = None,
    ) -> User:
        async with session_factory() as session:
            user = User(email=email, password_hash=TEST_PASSWORD_HASH)
            session.add(user)
            await session.flush()
            session.add(
                Membership(
                    tenant_id=tenant.id,
                    user_id=user.id,
                    primary_role_id=roles[0].id,
                    additional_role_ids=[str(role.id) for role in roles[1:]],
                    status=status,
                    member_metadata=metadata or {},
                )
            )
            await session.commit()
            return user

    return _create
