"""Pytest configuration and fixtures."""

import os

# Point the app at an in-memory database before config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import asyncio
import sys
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from api.tenancy import TenancyContext
from auth.jwt import create_access_token
from auth.passwords import hash_password
from db import Base
from main import app
from models.tenant import Tenant
from models.user import User
from services.permissions import full_permissions

# Fix Windows asyncio event loop
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

API = "/api/v1"
TEST_PASSWORD = "secret123"


def _sqlite_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Let SQLAlchemy, not the sqlite3 module, issue BEGIN so savepoints behave
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create a fresh database and session for one test."""
    engine = _sqlite_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
def override_get_db(db_session):
    """Override get_db dependency for testing."""
    from api.deps import get_db

    async def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(override_get_db):
    """HTTP client bound to the app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def make_auth_headers(user: User) -> dict:
    """Authorization header carrying the user's current tenant and role."""
    token = create_access_token(user.id, user.tenant_id, user.role)
    return {"Authorization": f"Bearer {token}"}


def ctx_for(user: User) -> TenancyContext:
    """Tenancy context of a tenant member, for service-level tests."""
    return TenancyContext.from_user(user)


@pytest.fixture
def create_tenant(db_session):
    """Helper to create a tenant."""

    async def _create_tenant(name=None, subdomain=None):
        suffix = uuid4().hex[:8]
        tenant = Tenant(
            id=uuid4(),
            name=name or f"Tenant {suffix}",
            subdomain=subdomain or f"tenant-{suffix}",
            email=f"office-{suffix}@example.com",
        )
        db_session.add(tenant)
        await db_session.commit()
        await db_session.refresh(tenant)
        return tenant

    return _create_tenant


@pytest.fixture
def create_user(db_session):
    """Helper to create a user, optionally inside a tenant."""

    async def _create_user(tenant=None, email=None, name=None, role="master", permissions=None, is_active=True):
        user = User(
            id=uuid4(),
            tenant_id=tenant.id if tenant else None,
            email=email or f"user-{uuid4().hex[:8]}@example.com",
            name=name or "Test User",
            password_hash=hash_password(TEST_PASSWORD),
            role=role,
            permissions=permissions if permissions is not None else full_permissions(),
            is_active=is_active,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _create_user


@pytest_asyncio.fixture
async def tenant_a(create_tenant):
    return await create_tenant(name="Tenant A", subdomain="tenant-a")


@pytest_asyncio.fixture
async def tenant_b(create_tenant):
    return await create_tenant(name="Tenant B", subdomain="tenant-b")


@pytest_asyncio.fixture
async def master_a(create_user, tenant_a):
    """Master user of Tenant A."""
    return await create_user(tenant=tenant_a, email="master-a@example.com", name="Master A")


@pytest_asyncio.fixture
async def master_b(create_user, tenant_b):
    """Master user of Tenant B."""
    return await create_user(tenant=tenant_b, email="master-b@example.com", name="Master B")


@pytest.fixture
def auth_headers():
    """Factory for Authorization headers of a user."""
    return make_auth_headers


@pytest.fixture
def tenancy():
    """Factory for the tenancy context of a user."""
    return ctx_for
