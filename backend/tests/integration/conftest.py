"""Shared fixtures for integration tests — in-memory SQLite and the ASGI app."""

from collections.abc import AsyncGenerator
from dataclasses import dataclass

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from clientdesk.infrastructure.database import Base
from clientdesk.infrastructure.database.models import DepartmentModel, UserModel
from clientdesk.infrastructure.database.session import get_db_session
from clientdesk.main import app

FIRM_A = "11111111-1111-1111-1111-111111111111"
FIRM_B = "22222222-2222-2222-2222-222222222222"

ADMIN_ID = "aaaaaaaa-0000-0000-0000-000000000001"
ADVOCATE_ID = "aaaaaaaa-0000-0000-0000-000000000002"
OTHER_ADMIN_ID = "bbbbbbbb-0000-0000-0000-000000000001"
DISABLED_ID = "aaaaaaaa-0000-0000-0000-000000000009"
DEPARTMENT_ID = "dddddddd-0000-0000-0000-000000000001"


@dataclass(frozen=True)
class Seed:
    firm_a: str = FIRM_A
    firm_b: str = FIRM_B
    admin_id: str = ADMIN_ID
    advocate_id: str = ADVOCATE_ID
    other_admin_id: str = OTHER_ADMIN_ID
    disabled_id: str = DISABLED_ID
    department_id: str = DEPARTMENT_ID

    @staticmethod
    def headers(user_id: str) -> dict[str, str]:
        return {"X-User-Id": user_id}


@pytest_asyncio.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory database per test, seeded with two firms' staff."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        session.add_all(
            [
                UserModel(id=ADMIN_ID, law_firm_id=FIRM_A, role="law_firm_admin",
                          email="admin@firm-a.com", first_name="Ada", last_name="Admin"),
                UserModel(id=ADVOCATE_ID, law_firm_id=FIRM_A, role="advocate",
                          email="advocate@firm-a.com", first_name="Alan", last_name="Advocate"),
                UserModel(id=OTHER_ADMIN_ID, law_firm_id=FIRM_B, role="law_firm_admin",
                          email="admin@firm-b.com", first_name="Bea", last_name="Admin"),
                UserModel(id=DISABLED_ID, law_firm_id=FIRM_A, role="law_firm_admin",
                          email="gone@firm-a.com", is_active=False),
                DepartmentModel(id=DEPARTMENT_ID, law_firm_id=FIRM_A, name="Litigation", code="LIT"),
            ]
        )
        await session.commit()

    yield factory

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Client for testing API endpoints against the seeded database."""

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def seed(session_factory) -> Seed:
    """Identifiers of the seeded firms, users and department."""
    return Seed()
