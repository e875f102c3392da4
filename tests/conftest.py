"""Root conftest — shared test configuration, async DB and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db and get_notifier overridden for route tests
    - Notifications captured by RecordingNotifier, never logged to a real channel

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for service and
      route tests (PostgreSQL-specific features not exercised here)
    - Fixtures live at the root: tests/services and tests/api share them
"""

import os

# Settings are cached on first use: pin test values before any netgroup import
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ADMIN_API_KEY", "test-admin-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, async_sessionmaker, create_async_engine,
)

import netgroup.infrastructure.database as db_module  # noqa: E402
from netgroup.api.deps import get_notifier  # noqa: E402
from netgroup.db.base import Base  # noqa: E402
from netgroup.infrastructure.database import DatabaseSessionManager, get_db  # noqa: E402
from netgroup.main import app  # noqa: E402
import netgroup.models  # noqa: E402, F401

ADMIN_HEADERS = {"X-API-Key": "test-admin-key"}


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)


class RecordingNotifier:
    """NotificationSink fake: records (event, recipient email, details)."""

    def __init__(self):
        self.sent: list[tuple[str, str, dict]] = []

    def notify_candidate(self, intent, event, **details):
        self.sent.append((event.value, intent.email, details))

    def notify_member(self, member, event, **details):
        self.sent.append((event.value, member.email, details))

    def notify_status_change(self, referral, recipient, event, **details):
        self.sent.append((event.value, recipient.email, details))

    def events(self) -> list[str]:
        return [event for event, _, _ in self.sent]


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
async def client(test_engine, test_session_factory, notifier):
    """FastAPI test client with DB and notifier dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    # Readiness probe reads db_manager directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
