"""Service test fixtures: fake clock and ids, memory store, FastAPI test client.

Invariants:
    - Every test gets a fresh MemoryItemStore and a container built around it
    - The clock only moves when a test advances it
    - The periodic trigger is never started by these fixtures (ASGITransport does
      not run the lifespan)

Design Decisions:
    - Container installed with init_container() so routes resolve it through
      get_container(), same as in production
    - SQL adapter tests build their own temp-file SQLite database
"""

import pytest
from httpx import ASGITransport, AsyncClient

from temptabs.config import Settings
from temptabs.infrastructure.database import DatabaseSessionManager
from temptabs.infrastructure.kv_store import MemoryItemStore, SqlItemStore
from temptabs.infrastructure.sinks import LatestViewSink, RecordingBadgeSink
from temptabs.main import app
from temptabs.services.badge_coordinator import BadgeCleanupCoordinator
from temptabs.services.container import build_container, init_container, reset_container
from temptabs.services.temptabs_service import TempTabsService

from tests.services.fakes import FixedClock, SequentialIds


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def store():
    return MemoryItemStore()


@pytest.fixture
def service(store, clock, ids):
    return TempTabsService(store, clock, ids, default_retention_hours=24, max_items=500)


@pytest.fixture
def badge():
    return RecordingBadgeSink()


@pytest.fixture
def coordinator(service, badge):
    return BadgeCleanupCoordinator(service, badge, max_items=500, warning_margin=50)


@pytest.fixture
def view_sink():
    return LatestViewSink()


@pytest.fixture
async def sql_store(tmp_path):
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path}/test.db")
    await manager.create_all()
    yield SqlItemStore(manager)
    await manager.dispose()


@pytest.fixture
async def container(store, clock, ids):
    settings = Settings(store_backend="memory", cleanup_on_start=False)
    built = init_container(build_container(settings, store=store, clock=clock, ids=ids))
    yield built
    await built.refresher.wait_idle()
    await built.trigger.stop()
    reset_container()


@pytest.fixture
async def client(container):
    """FastAPI test client bound to the per-test container."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
