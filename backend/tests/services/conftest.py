"""Service test fixtures — dispatcher, async DB, and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_tool_dispatch dependency overridden: the lifespan never runs in tests
    - recording_sink captures audit entries without touching a database

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for audit tests
      (PostgreSQL-specific features not exercised here)
    - db_manager patched with a manager bound to the test engine, so readiness
      and SqlAuditLog exercise the real session/rollback path
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from xcloudflow.api.routes.mcp import get_tool_dispatch
from xcloudflow.core.domain_types import RunId
from xcloudflow.core.repository_protocols import RunEntry
from xcloudflow.db.base import Base
from xcloudflow.infrastructure.database import DatabaseSessionManager
import xcloudflow.infrastructure.database as db_module
from xcloudflow.main import app
from xcloudflow.services.tool_dispatch import ToolDispatch
from xcloudflow.services.tools_registry import build_tool_catalog

FIXED_NOW = datetime(2026, 10, 19, 12, 30, 0, tzinfo=timezone.utc)


class RecordingSink:
    """AuditSink that keeps entries in memory."""

    def __init__(self):
        self.entries: list[RunEntry] = []

    async def record_run(self, entry: RunEntry) -> RunId:
        self.entries.append(entry)
        return RunId(f"run-{len(self.entries)}")


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def dispatch(recording_sink):
    return ToolDispatch(
        build_tool_catalog(),
        audit=recording_sink,
        actor="ci",
        clock=lambda: FIXED_NOW,
    )


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
def session_manager(test_engine, test_session_factory):
    """DatabaseSessionManager bound to the test engine (bypasses pool kwargs)."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
async def client(dispatch):
    """FastAPI test client with the dispatcher dependency overridden."""
    app.dependency_overrides[get_tool_dispatch] = lambda: dispatch

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def patched_db_manager(session_manager):
    """Install the test session manager as the process-wide db_manager."""
    original_manager = db_module.db_manager
    db_module.db_manager = session_manager
    yield session_manager
    db_module.db_manager = original_manager
