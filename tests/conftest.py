"""Pytest configuration and shared fixtures"""
import pytest
import os
from typing import AsyncGenerator

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Test database URL (use in-memory SQLite for unit tests)
TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///:memory:"
)

ADMIN_EMAIL = "admin@example.com"
MODERATOR_EMAIL = "moderator@example.com"
PASSWORD = "correct-horse"


@pytest.fixture
async def test_engine():
    """Fresh schema per test"""
    from portal.core.database import Base
    import portal.db.models  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False} if "sqlite" in TEST_DATABASE_URL else {},
        poolclass=StaticPool if "sqlite" in TEST_DATABASE_URL else None,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    async with session_factory() as session:
        yield session


async def _create_account(session_factory, email, user_types=(), roles=(), approval_status=None):
    from portal.db.enums import AccountStatus
    from portal.lifecycle.users import user_service

    async with session_factory() as session:
        return await user_service.create_account(
            session,
            email=email,
            password=PASSWORD,
            full_name=email.split("@")[0].title(),
            user_types=list(user_types),
            roles=list(roles),
            approval_status=approval_status or AccountStatus.APPROVED,
        )


@pytest.fixture
def make_account(session_factory):
    """Factory creating accounts directly through the user service"""

    async def _make(email, user_types=(), roles=(), approval_status=None):
        return await _create_account(session_factory, email, user_types, roles, approval_status)

    return _make


@pytest.fixture
async def admin_user(make_account):
    from portal.db.enums import Role

    return await make_account(ADMIN_EMAIL, roles=[Role.ADMIN])


@pytest.fixture
async def moderator_user(make_account):
    from portal.db.enums import Role

    return await make_account(MODERATOR_EMAIL, roles=[Role.AREA_MODERATOR])


@pytest.fixture
def admin_context(admin_user):
    from portal.lifecycle.authorization import SessionContext

    return SessionContext.from_user(admin_user)


@pytest.fixture
def moderator_context(moderator_user):
    from portal.lifecycle.authorization import SessionContext

    return SessionContext.from_user(moderator_user)


@pytest.fixture
def api_app(session_factory):
    """The FastAPI app bound to the test database"""
    from portal.core.database import get_db
    from portal.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def make_client(api_app):
    """Factory for PortalClient instances talking to the app in-process"""
    from portal.client import PortalClient

    clients = []

    def _make():
        portal_client = PortalClient(
            "http://testserver/api",
            transport=httpx.ASGITransport(app=api_app),
        )
        clients.append(portal_client)
        return portal_client

    yield _make

    for portal_client in clients:
        await portal_client.close()


@pytest.fixture
async def client(make_client):
    """Anonymous PortalClient"""
    return make_client()


@pytest.fixture
async def admin_client(make_client, admin_user):
    """PortalClient logged in as an administrator"""
    portal_client = make_client()
    await portal_client.auth.login(ADMIN_EMAIL, PASSWORD)
    return portal_client


@pytest.fixture
async def moderator_client(make_client, moderator_user):
    """PortalClient logged in as an area moderator"""
    portal_client = make_client()
    await portal_client.auth.login(MODERATOR_EMAIL, PASSWORD)
    return portal_client
