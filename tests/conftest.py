"""
Shared fixtures: a fresh in-memory database per test, an HTTP client bound to
it, seeded customers and API keys for each role.
"""

import os
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from courierdesk.core.security import create_api_key
from courierdesk.database import Base, get_db
from courierdesk.main import app
from courierdesk.models import Customer, Role
from tests.fixtures.test_data import generate_customer

# Use in-memory SQLite for tests by default, unless TEST_DATABASE_URL is set
TEST_DB_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture
async def test_engine():
    """Function-scoped engine; every test starts from empty tables."""
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False} if "sqlite" in TEST_DB_URL else {},
        poolclass=StaticPool if "sqlite" in TEST_DB_URL else None,
    )
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    yield engine
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Session shared by the test body and the app under test."""
    session_maker = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    session = session_maker()
    
    yield session
    
    await session.close()


@pytest.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Test client with override for get_db."""
    async def override_get_db():
        yield db_session
    
    app.dependency_overrides[get_db] = override_get_db
    
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    
    app.dependency_overrides.clear()


@pytest.fixture
async def customer(db_session) -> Customer:
    """Customer CUST001 with a full profile."""
    record = Customer(**generate_customer(user_code="CUST001"))
    db_session.add(record)
    await db_session.commit()
    return record


@pytest.fixture
async def other_customer(db_session) -> Customer:
    record = Customer(**generate_customer(user_code="CUST002"))
    db_session.add(record)
    await db_session.commit()
    return record


async def _issue_key(db_session, role: Role, user_code=None) -> str:
    _, secret = await create_api_key(db_session, role, user_code=user_code, label=f"test-{role.value}")
    await db_session.commit()
    return secret


@pytest.fixture
async def admin_headers(db_session) -> dict:
    return {"X-API-Key": await _issue_key(db_session, Role.ADMIN)}


@pytest.fixture
async def staff_headers(db_session) -> dict:
    return {"X-API-Key": await _issue_key(db_session, Role.WAREHOUSE_STAFF)}


@pytest.fixture
async def support_headers(db_session) -> dict:
    return {"X-API-Key": await _issue_key(db_session, Role.CUSTOMER_SUPPORT)}


@pytest.fixture
async def customer_headers(db_session, customer) -> dict:
    return {"X-API-Key": await _issue_key(db_session, Role.CUSTOMER, user_code=customer.user_code)}


@pytest.fixture
async def other_customer_headers(db_session, other_customer) -> dict:
    return {"X-API-Key": await _issue_key(db_session, Role.CUSTOMER, user_code=other_customer.user_code)}
