"""Test fixtures — a fresh in-memory database per test.

Learn: Each test gets its own async engine on sqlite+aiosqlite:///:memory:
with a StaticPool (one shared connection, so the schema created by
create_all is visible to the session). Nothing leaks between tests.

Settings are read at import time, so the environment is prepared
before anything from userservice is imported.
"""

import os

os.environ.setdefault("USERSERVICE_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("USERSERVICE_BCRYPT_ROUNDS", "4")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from userservice.db.engine import get_db
from userservice.db.models import Base
from userservice.main import app
from userservice.schemas.user import SignupRequest
from userservice.services.user_service import UserService

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


class FakeClock:
    """Deterministic yyyyMMddHHmmss clock that moves one second per call."""

    def __init__(self, start: int = 20240101120000):
        self.current = start

    def __call__(self) -> str:
        value = str(self.current)
        self.current += 1
        return value


@pytest_asyncio.fixture()
async def db_session():
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest_asyncio.fixture()
async def service(db_session, clock):
    return UserService(db_session, clock=clock)


@pytest.fixture()
def signup_request():
    """Factory for signup payloads with sensible defaults."""

    def make(
        username: str = "alice",
        password: str = "pw1",
        nickname: str = "Ali",
        birth_date: str = "19900101",
        birth_time: str | None = "0800",
    ) -> SignupRequest:
        return SignupRequest(
            username=username,
            password=password,
            nickname=nickname,
            birth_date=birth_date,
            birth_time=birth_time,
        )

    return make


@pytest_asyncio.fixture()
async def client(db_session):
    """HTTP client with the app's get_db overridden to the test session.

    Auth is NOT mocked: protected routes need a real access token
    from /auth/login.
    """

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
