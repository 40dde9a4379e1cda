"""Pytest configuration for all tests."""

import os

# Cheap hashing and a fixed signing key for tests; must be set before config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-portero-residencial")

from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import domain.models  # noqa: F401  registers tables
from domain.models.user import User, UserCreate, ROLE_OWNER, ROLE_RESIDENT
from infrastructure.stores import AccessLogStore, InvitationStore, QrCodeStore, UserStore

PASSWORD = "secret123"


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async_session_maker = sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency."""
    from main import app
    from infrastructure.database import get_session

    app.dependency_overrides[get_session] = lambda: db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides = {}


@pytest.fixture
def qr_store(db_session: AsyncSession) -> QrCodeStore:
    return QrCodeStore(db_session)


@pytest.fixture
def access_log_store(db_session: AsyncSession) -> AccessLogStore:
    return AccessLogStore(db_session)


@pytest.fixture
def invitation_store(db_session: AsyncSession) -> InvitationStore:
    return InvitationStore(db_session)


@pytest.fixture
def user_store(db_session: AsyncSession) -> UserStore:
    return UserStore(db_session)


@pytest_asyncio.fixture
async def resident_user(user_store: UserStore) -> User:
    """A resident stored directly, without going through the API."""
    return await user_store.create(
        UserCreate(
            id="resident-ana",
            email="ana@example.com",
            role=ROLE_RESIDENT,
            residential_id="residential-1",
            apartment="101",
            name="Ana",
        )
    )


@pytest_asyncio.fixture
async def owner_user(user_store: UserStore) -> User:
    return await user_store.create(
        UserCreate(
            id="residential-1",
            email="owner@example.com",
            role=ROLE_OWNER,
            residential_id="residential-1",
            name="Owner",
        )
    )


async def login(client: AsyncClient, email: str, password: str = PASSWORD) -> Dict[str, str]:
    r = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


async def register_owner_via_api(client: AsyncClient, email: str = "owner@example.com") -> dict:
    r = await client.post(
        "/api/v1/auth/register",
        json={
            "name": "Laura Owner",
            "email": email,
            "residential_name": "Residencial del Valle",
            "address": "Av. Principal 1234",
            "password": PASSWORD,
            "confirm_password": PASSWORD,
        },
    )
    assert r.status_code == 201, r.text
    body = r.json()
    return {
        "user": body["user"],
        "residential": body["residential"],
        "headers": await login(client, email),
    }


async def invite_and_accept(
    client: AsyncClient,
    owner_headers: Dict[str, str],
    email: str,
    name: str,
    apartment: str,
) -> dict:
    r = await client.post("/api/v1/invitations/", json={"email": email}, headers=owner_headers)
    assert r.status_code == 201, r.text
    token = r.json()["token"]

    r = await client.post(
        "/api/v1/invitations/accept",
        json={
            "token": token,
            "name": name,
            "apartment": apartment,
            "password": PASSWORD,
            "confirm_password": PASSWORD,
        },
    )
    assert r.status_code == 201, r.text
    return {"user": r.json(), "headers": await login(client, email)}


@pytest_asyncio.fixture
async def owner(client: AsyncClient) -> dict:
    return await register_owner_via_api(client)


@pytest_asyncio.fixture
async def resident(client: AsyncClient, owner: dict) -> dict:
    return await invite_and_accept(client, owner["headers"], "ana@example.com", "Ana", "101")
