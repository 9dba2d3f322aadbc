"""
Shared test fixtures for the notification API tests.

Provides database session management, test clients, a recording push
provider and member fixtures.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from clubhub.auth.session import create_session_token
from clubhub.config import settings
from clubhub.database import Base, get_db
from clubhub.exceptions import TokenUnregistered
from clubhub.main import app
from clubhub.middleware.rate_limit import reset_limiter
from clubhub.services.cache import InboxCache, get_inbox_cache
from clubhub.services.push import get_push_provider

# Import models so they're registered with Base.metadata before table creation
from clubhub.models import DeviceToken, Member, Notification, ScheduledNotification  # noqa: F401
from tests.factories import create_member

# Test database URL (uses separate test database)
TEST_DATABASE_URL = settings.test_database_url

# Create test engine with NullPool to avoid connection issues
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=NullPool,
    echo=False,
)

TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class FakePushProvider:
    """Records every send; tokens listed in ``rejected`` fail."""

    def __init__(self):
        self.sent: list[tuple[str, dict[str, str], dict[str, str]]] = []
        self.topics: list[tuple[str, dict[str, str], dict[str, str]]] = []
        self.rejected: dict[str, Exception] = {}
        self.topic_error: Exception | None = None

    def reject(self, token: str, error: Exception | None = None) -> None:
        self.rejected[token] = error or TokenUnregistered("Requested entity was not found.")

    async def send(self, token: str, notification: dict[str, str], data: dict[str, str]) -> str:
        if token in self.rejected:
            raise self.rejected[token]
        self.sent.append((token, notification, data))
        return f"projects/test/messages/{len(self.sent)}"

    async def send_to_topic(
        self, topic: str, notification: dict[str, str], data: dict[str, str]
    ) -> str:
        if self.topic_error is not None:
            raise self.topic_error
        self.topics.append((topic, notification, data))
        return f"projects/test/messages/topic-{len(self.topics)}"


# --- Rate Limiter Reset Fixture ---


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Reset rate limiter before each test to ensure test isolation."""
    reset_limiter()
    yield


# --- Database Fixtures ---


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create tables before each test function, drop after.
    Provides isolated database state per test.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def inbox_cache() -> InboxCache:
    """Fresh inbox cache per test."""
    return InboxCache(ttl_seconds=120, max_entries=100)


@pytest.fixture
def push_provider() -> FakePushProvider:
    return FakePushProvider()


@pytest_asyncio.fixture(scope="function")
async def async_client(
    db_session: AsyncSession,
    inbox_cache: InboxCache,
    push_provider: FakePushProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client configured for testing.
    Overrides database, cache and push provider dependencies.
    """

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_inbox_cache] = lambda: inbox_cache
    app.dependency_overrides[get_push_provider] = lambda: push_provider

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True,
    ) as client:
        yield client

    app.dependency_overrides.clear()


# --- Authentication Helper Fixtures ---


@pytest.fixture
def session_cookies():
    """Factory fixture for creating session cookies for a member."""

    def _session_cookies(member: dict[str, Any]) -> dict[str, str]:
        token = create_session_token(member["user_id"], member["role"])
        return {settings.session_cookie_name: token}

    return _session_cookies


# --- Member Fixtures ---


@pytest_asyncio.fixture
async def test_member(db_session: AsyncSession) -> dict[str, Any]:
    """A regular member with no devices."""
    return await create_member(db_session, "u1", role="member")


@pytest_asyncio.fixture
async def second_member(db_session: AsyncSession) -> dict[str, Any]:
    """A second member for ownership scenarios."""
    return await create_member(db_session, "u2", role="member")


@pytest_asyncio.fixture
async def test_admin(db_session: AsyncSession) -> dict[str, Any]:
    """An admin allowed to send notifications."""
    return await create_member(db_session, "admin1", role="admin")


@pytest.fixture
def frozen_time():
    """
    Fixture for time-based testing using freezegun.

    Usage:
        with frozen_time("2026-02-01 12:00:00"):
            # time is frozen
    """
    from freezegun import freeze_time

    return freeze_time
